"""Unit tests for obligation persistence"""

import pytest
from dataclasses import replace
from datetime import date, datetime
from sqlalchemy.orm import Session
from bills_engine.domain.exceptions import ObligationNotFoundError
from bills_engine.domain.models import Debt, FixedBill, InstallmentPlan
from bills_engine.infrastructure.database.repositories import ObligationRepository


def test_round_trip_each_kind(db: Session, rent: FixedBill, laptop: InstallmentPlan, car_loan: Debt):
    repo = ObligationRepository(db)
    rent = replace(rent, end_date=date(2024, 12, 31), exclusions=["2024-3"])
    laptop = replace(laptop, payment_history=[datetime(2024, 1, 15, 12)], current_installment=1)

    for obligation in (rent, laptop, car_loan):
        repo.add(obligation)
    db.commit()

    assert repo.get("rent") == rent
    assert repo.get("laptop") == laptop
    assert repo.get("car-loan") == car_loan
    assert {o.id for o in repo.list_all()} == {"rent", "laptop", "car-loan"}


def test_update_replaces_record(db: Session, car_loan: Debt):
    repo = ObligationRepository(db)
    repo.add(car_loan)

    settled = replace(car_loan, current_balance_cents=0, settled_date=datetime(2024, 3, 15, 10))
    repo.update(settled)
    db.commit()

    stored = repo.get(car_loan.id)
    assert stored.is_settled is True
    assert stored.current_balance_cents == 0
    assert stored.settled_date == datetime(2024, 3, 15, 10)


def test_update_unknown_id(db: Session, rent: FixedBill):
    with pytest.raises(ObligationNotFoundError):
        ObligationRepository(db).update(rent)


def test_remove(db: Session, rent: FixedBill):
    repo = ObligationRepository(db)
    repo.add(rent)
    repo.remove(rent.id)

    assert repo.get(rent.id) is None
    with pytest.raises(ObligationNotFoundError):
        repo.remove(rent.id)
