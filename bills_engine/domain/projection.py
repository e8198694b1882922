"""Temporal projection of obligations onto a calendar month"""

from datetime import date
from typing import Iterable, List

from bills_engine.domain.models import (
    Debt,
    FixedBill,
    InstallmentPlan,
    Obligation,
    ObligationKind,
    OccurrenceStatus,
    ProjectedOccurrence,
    Projection,
    RecurringObligation,
)
from bills_engine.utils.date_utils import (
    exclusion_token,
    first_instant,
    last_day_of_month,
    month_bounds,
    month_index,
    months_between,
    validate_month,
)

_KIND_ORDER = {ObligationKind.FIXED: 0, ObligationKind.INSTALLMENT: 1, ObligationKind.DEBT: 2}


def project(obligation: Obligation, year: int, month: int) -> Projection:
    """
    Decide whether an obligation has an occurrence in (year, month).

    Rules, in order:
    - An exclusion token for the month hides a fixed bill or installment,
      whatever else the record says.
    - Debts show from their start month until the month they were settled in.
    - Fixed bills show from start_date through the month containing end_date.
    - Installments show while the 1-based occurrence index is within
      [1, total_installments].

    "Paid this month" for recurring kinds means some payment_history entry
    falls in the same calendar month. Payments are not tied to a particular
    installment number.
    """
    validate_month(year, month)

    if isinstance(obligation, Debt):
        return _project_debt(obligation, year, month)

    if not isinstance(obligation, RecurringObligation):
        raise TypeError(f"Unknown obligation type: {type(obligation).__name__}")

    if obligation.is_excluded(exclusion_token(year, month)):
        return Projection(visible=False)

    is_paid = (year, month) in obligation.paid_months()

    if isinstance(obligation, InstallmentPlan):
        index = months_between(obligation.start_date, year, month) + 1
        visible = 1 <= index <= obligation.total_installments
        return Projection(visible=visible, occurrence_index=index, is_paid_this_month=is_paid)

    return Projection(visible=_fixed_is_active(obligation, year, month), is_paid_this_month=is_paid)


def _fixed_is_active(bill: FixedBill, year: int, month: int) -> bool:
    if bill.end_date and month_index(year, month) > month_index(bill.end_date.year, bill.end_date.month):
        return False
    if bill.start_date:
        _, last_day = month_bounds(year, month)
        if bill.start_date > last_day:
            return False
    return True


def _project_debt(debt: Debt, year: int, month: int) -> Projection:
    _, last_day = month_bounds(year, month)
    if debt.start_date > last_day:
        return Projection(visible=False)

    # Settled debts stay visible through their settlement month
    if debt.is_settled and debt.settled_date and debt.settled_date < first_instant(year, month):
        return Projection(visible=False)

    return Projection(visible=True, is_paid_this_month=debt.is_settled)


def effective_due_day(obligation: Obligation, year: int, month: int) -> int:
    """Due day clamped to the month length (day 31 falls on Feb 28/29)"""
    return min(obligation.due_day, last_day_of_month(year, month))


def is_overdue(obligation: Obligation, year: int, month: int, today: date | None = None) -> bool:
    """
    Overdue predicate for an unpaid recurring occurrence.

    Any month before today's month is overdue; in today's month the clamped
    due day must already have passed. Debts are never overdue.
    """
    if isinstance(obligation, Debt):
        return False

    today = today or date.today()
    query = month_index(year, month)
    current = month_index(today.year, today.month)

    if query < current:
        return True
    if query == current:
        return effective_due_day(obligation, year, month) < today.day
    return False


def derive_status(
    obligation: Obligation,
    projection: Projection,
    year: int,
    month: int,
    today: date | None = None,
) -> OccurrenceStatus:
    if projection.is_paid_this_month:
        return OccurrenceStatus.PAID
    if is_overdue(obligation, year, month, today):
        return OccurrenceStatus.OVERDUE
    return OccurrenceStatus.PENDING


def project_month(
    obligations: Iterable[Obligation],
    year: int,
    month: int,
    today: date | None = None,
) -> List[ProjectedOccurrence]:
    """
    Visible occurrences for a month, with status.

    Ordered fixed bills first, then installments, then debts; by effective
    due day within each group.
    """
    today = today or date.today()
    occurrences = []

    for obligation in obligations:
        projection = project(obligation, year, month)
        if not projection.visible:
            continue

        occurrences.append(
            ProjectedOccurrence(
                obligation=obligation,
                occurrence_index=projection.occurrence_index,
                is_paid=projection.is_paid_this_month,
                status=derive_status(obligation, projection, year, month, today),
                effective_due_day=effective_due_day(obligation, year, month),
            )
        )

    occurrences.sort(key=lambda o: (_KIND_ORDER[o.obligation.kind], o.effective_due_day))
    return occurrences


def remaining_installments(plan: InstallmentPlan, year: int, month: int) -> int:
    """Installments still open from (year, month) onward, counting the month itself"""
    index = months_between(plan.start_date, year, month) + 1
    return plan.total_installments - index + 1
