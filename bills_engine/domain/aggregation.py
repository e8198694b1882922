"""Monthly totals across the obligation collection"""

from datetime import date
from typing import Iterable

from bills_engine.domain.models import Debt, MonthlySummary, Obligation
from bills_engine.domain.projection import is_overdue, project


def summarize(
    obligations: Iterable[Obligation],
    year: int,
    month: int,
    today: date | None = None,
) -> MonthlySummary:
    """
    Fold visible fixed bills and installments of a month into totals.

    Debts have no monthly amount due and are left out. Amounts are integer
    cents, so total_cents == paid_cents + pending_cents holds exactly.
    """
    today = today or date.today()
    summary = MonthlySummary()

    for obligation in obligations:
        if isinstance(obligation, Debt):
            continue

        projection = project(obligation, year, month)
        if not projection.visible:
            continue

        summary.total_cents += obligation.amount_cents
        if projection.is_paid_this_month:
            summary.paid_cents += obligation.amount_cents
        elif is_overdue(obligation, year, month, today):
            summary.overdue_count += 1

    summary.pending_cents = summary.total_cents - summary.paid_cents
    return summary
