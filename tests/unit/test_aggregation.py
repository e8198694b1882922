"""Unit tests for monthly totals"""

from dataclasses import replace
from datetime import date, datetime
from bills_engine.domain.aggregation import summarize
from bills_engine.domain.models import Debt, FixedBill, InstallmentPlan, MonthlySummary


def test_summarize_totals(rent: FixedBill, laptop: InstallmentPlan):
    paid_laptop = replace(laptop, payment_history=[datetime(2024, 2, 15, 12)])

    summary = summarize([rent, paid_laptop], 2024, 2, today=date(2024, 2, 12))

    assert summary == MonthlySummary(total_cents=180000, paid_cents=30000, pending_cents=150000, overdue_count=1)


def test_summarize_excludes_debts(rent: FixedBill, car_loan: Debt):
    summary = summarize([rent, car_loan], 2024, 2, today=date(2024, 2, 1))

    assert summary.total_cents == rent.amount_cents
    assert summary.overdue_count == 0


def test_summarize_skips_invisible(rent: FixedBill, laptop: InstallmentPlan):
    excluded_rent = replace(rent, exclusions=["2024-10"])

    summary = summarize([excluded_rent, laptop], 2024, 11, today=date(2024, 1, 1))

    assert summary == MonthlySummary()


def test_summarize_past_month_counts_every_unpaid(rent: FixedBill, laptop: InstallmentPlan):
    summary = summarize([rent, laptop], 2024, 3, today=date(2024, 6, 1))

    assert summary.overdue_count == 2
    assert summary.pending_cents == summary.total_cents


def test_summarize_uses_clamped_due_day():
    """Due on the 31st in February is not overdue on Feb 29"""
    bill = FixedBill(id="x", description="X", amount_cents=100, due_day=31, start_date=date(2024, 1, 1))

    assert summarize([bill], 2024, 2, today=date(2024, 2, 29)).overdue_count == 0


def test_summarize_is_exactly_additive():
    """total == paid + pending with odd-cent amounts"""
    bills = [
        FixedBill(
            id=f"b{i}",
            description=f"Bill {i}",
            amount_cents=1001 + i * 37,
            due_day=1 + i % 28,
            start_date=date(2024, 1, 1),
            payment_history=[datetime(2024, 7, 1, 12)] if i % 3 == 0 else [],
        )
        for i in range(50)
    ]

    summary = summarize(bills, 2024, 7, today=date(2024, 7, 15))

    assert summary.total_cents == summary.paid_cents + summary.pending_cents
    assert summary.total_cents == sum(b.amount_cents for b in bills)
    assert summary.paid_cents == sum(b.amount_cents for b in bills[::3])


def test_summarize_empty_collection():
    assert summarize([], 2024, 1) == MonthlySummary()
