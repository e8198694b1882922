"""Due-date alerts for the current month"""

from datetime import date
from typing import Iterable, List

from bills_engine.domain.models import AlertLevel, Debt, DueAlert, Obligation
from bills_engine.domain.projection import effective_due_day, project


def due_alerts(
    obligations: Iterable[Obligation],
    today: date | None = None,
    due_soon_days: int = 3,
) -> List[DueAlert]:
    """
    Flag unpaid occurrences of today's month by distance to their due day.

    Levels:
    - OVERDUE: due day already passed
    - DUE_TODAY: due today
    - DUE_SOON: due within due_soon_days

    Debts are skipped (their due day is only a reference).
    """
    today = today or date.today()
    alerts = []

    for obligation in obligations:
        if isinstance(obligation, Debt):
            continue

        projection = project(obligation, today.year, today.month)
        if not projection.visible or projection.is_paid_this_month:
            continue

        due_day = effective_due_day(obligation, today.year, today.month)
        days_remaining = due_day - today.day

        if days_remaining < 0:
            level = AlertLevel.OVERDUE
        elif days_remaining == 0:
            level = AlertLevel.DUE_TODAY
        elif days_remaining <= due_soon_days:
            level = AlertLevel.DUE_SOON
        else:
            continue

        alerts.append(
            DueAlert(
                obligation_id=obligation.id,
                description=obligation.description,
                level=level,
                effective_due_day=due_day,
                days_remaining=days_remaining,
            )
        )

    alerts.sort(key=lambda a: a.days_remaining)
    return alerts
