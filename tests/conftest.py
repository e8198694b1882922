"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from bills_engine.api.main import create_app
from bills_engine.infrastructure.database.models import Base
from bills_engine.infrastructure.database.session import get_db
from bills_engine.domain.models import Debt, FixedBill, InstallmentPlan, LedgerTransactionRequest


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingLedger:
    """LedgerSink that keeps every request it receives"""

    def __init__(self):
        self.requests: List[LedgerTransactionRequest] = []

    def add_transaction(self, request: LedgerTransactionRequest) -> None:
        self.requests.append(request)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def ledger() -> RecordingLedger:
    return RecordingLedger()


@pytest.fixture
def rent() -> FixedBill:
    """Fixed monthly bill due on the 10th since January 2024"""
    return FixedBill(
        id="rent",
        description="Rent",
        amount_cents=150000,
        due_day=10,
        category="Housing",
        sub_category="Rent",
        start_date=date(2024, 1, 1),
    )


@pytest.fixture
def laptop() -> InstallmentPlan:
    """10 installments of $300 starting January 2024"""
    return InstallmentPlan(
        id="laptop",
        description="Laptop",
        amount_cents=30000,
        due_day=15,
        category="Personal",
        sub_category="Electronics",
        start_date=date(2024, 1, 1),
        total_installments=10,
    )


@pytest.fixture
def car_loan() -> Debt:
    """Open $1000 debt since January 2024"""
    return Debt(
        id="car-loan",
        description="Car loan",
        amount_cents=100000,
        due_day=5,
        category="Obligations",
        sub_category="Loans",
        start_date=date(2024, 1, 1),
    )
