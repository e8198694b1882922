"""SQLAlchemy ORM models for persisted obligations"""

from sqlalchemy import Column, String, BigInteger, Boolean, DateTime, Date, Integer, Text, JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class ObligationRecord(Base):
    """One fixed bill, installment plan or debt with its mutable history"""

    __tablename__ = "obligation"

    id = Column(String(64), primary_key=True)
    kind = Column(String(16), nullable=False, index=True)
    description = Column(Text, nullable=False)
    category = Column(Text, nullable=False, default="")
    sub_category = Column(Text, nullable=False, default="")
    amount_cents = Column(BigInteger, nullable=False)
    due_day = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    total_installments = Column(Integer, nullable=True)
    current_installment = Column(Integer, nullable=True)
    payment_history = Column(JSON, nullable=False, default=list)  # ISO timestamps
    exclusions = Column(JSON, nullable=False, default=list)  # "{year}-{zero_based_month}"
    current_balance_cents = Column(BigInteger, nullable=True)
    is_settled = Column(Boolean, nullable=False, default=False)
    settled_date = Column(DateTime, nullable=True)
    last_paid_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
