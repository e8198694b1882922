"""Data access layer for obligations"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from bills_engine.infrastructure.database.models import ObligationRecord
from bills_engine.domain.exceptions import ObligationNotFoundError
from bills_engine.domain.models import (
    Debt,
    FixedBill,
    InstallmentPlan,
    Obligation,
    ObligationKind,
    RecurringObligation,
)


class ObligationRepository:
    """Repository for obligations; implements the ObligationStore collaborator"""

    def __init__(self, db: Session):
        self.db = db

    def add(self, obligation: Obligation) -> None:
        """Insert a new obligation"""
        record = ObligationRecord(id=obligation.id)
        _copy_to_record(obligation, record)
        self.db.add(record)
        self.db.flush()

    def update(self, obligation: Obligation) -> None:
        """Replace every field of an existing obligation"""
        record = self.db.get(ObligationRecord, obligation.id)
        if record is None:
            raise ObligationNotFoundError(f"Obligation {obligation.id} not found")
        _copy_to_record(obligation, record)
        self.db.flush()

    def remove(self, obligation_id: str) -> None:
        record = self.db.get(ObligationRecord, obligation_id)
        if record is None:
            raise ObligationNotFoundError(f"Obligation {obligation_id} not found")
        self.db.delete(record)
        self.db.flush()

    def get(self, obligation_id: str) -> Optional[Obligation]:
        record = self.db.get(ObligationRecord, obligation_id)
        return _to_domain(record) if record else None

    def list_all(self) -> List[Obligation]:
        """Fetch the whole collection, oldest first"""
        records = (
            self.db.query(ObligationRecord)
            .order_by(ObligationRecord.created_at.asc(), ObligationRecord.id.asc())
            .all()
        )
        return [_to_domain(r) for r in records]


def _copy_to_record(obligation: Obligation, record: ObligationRecord) -> None:
    record.kind = obligation.kind.value
    record.description = obligation.description
    record.category = obligation.category
    record.sub_category = obligation.sub_category
    record.amount_cents = obligation.amount_cents
    record.due_day = obligation.due_day
    record.last_paid_date = obligation.last_paid_date
    record.start_date = obligation.start_date

    if isinstance(obligation, RecurringObligation):
        record.payment_history = [paid_at.isoformat() for paid_at in obligation.payment_history]
        record.exclusions = list(obligation.exclusions)
    else:
        record.payment_history = []
        record.exclusions = []

    record.end_date = obligation.end_date if isinstance(obligation, FixedBill) else None

    if isinstance(obligation, InstallmentPlan):
        record.total_installments = obligation.total_installments
        record.current_installment = obligation.current_installment
    else:
        record.total_installments = None
        record.current_installment = None

    if isinstance(obligation, Debt):
        record.current_balance_cents = obligation.current_balance_cents
        record.is_settled = obligation.is_settled
        record.settled_date = obligation.settled_date
    else:
        record.current_balance_cents = None
        record.is_settled = False
        record.settled_date = None


def _to_domain(record: ObligationRecord) -> Obligation:
    common = dict(
        id=record.id,
        description=record.description,
        amount_cents=record.amount_cents,
        due_day=record.due_day,
        category=record.category or "",
        sub_category=record.sub_category or "",
        last_paid_date=record.last_paid_date,
    )
    kind = ObligationKind(record.kind)

    if kind == ObligationKind.DEBT:
        return Debt(
            start_date=record.start_date,
            current_balance_cents=record.current_balance_cents,
            is_settled=bool(record.is_settled),
            settled_date=record.settled_date,
            **common,
        )

    recurring = dict(
        start_date=record.start_date,
        payment_history=[datetime.fromisoformat(paid_at) for paid_at in record.payment_history or []],
        exclusions=list(record.exclusions or []),
    )
    if kind == ObligationKind.INSTALLMENT:
        return InstallmentPlan(
            total_installments=record.total_installments,
            current_installment=record.current_installment or 0,
            **recurring,
            **common,
        )
    return FixedBill(end_date=record.end_date, **recurring, **common)
