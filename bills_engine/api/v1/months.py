"""GET /v1/months/{year}/{month} and GET /v1/alerts - read-only projections"""

from fastapi import APIRouter, Depends, Path

from bills_engine.api.dependencies import get_obligation_service
from bills_engine.api.v1.schemas import (
    AlertSchema,
    AlertsResponse,
    MonthViewResponse,
    OccurrenceSchema,
    SummarySchema,
)
from bills_engine.config import settings
from bills_engine.services.obligations import ObligationService

router = APIRouter()


@router.get("/months/{year}/{month}", response_model=MonthViewResponse)
def get_month(
    year: int = Path(..., ge=1),
    month: int = Path(..., ge=1, le=12),
    service: ObligationService = Depends(get_obligation_service),
):
    """
    Obligations active in a month with their status, plus monthly totals.

    Returns:
        Visible occurrences (fixed, installments, debts) and a summary over
        fixed bills and installments
    """
    occurrences, summary = service.month_view(year, month)
    return MonthViewResponse(
        year=year,
        month=month,
        occurrences=[OccurrenceSchema.from_domain(o) for o in occurrences],
        summary=SummarySchema.from_domain(summary),
    )


@router.get("/alerts", response_model=AlertsResponse)
def get_alerts(service: ObligationService = Depends(get_obligation_service)):
    """Unpaid bills of the current month that are overdue, due today or due soon"""
    alerts = service.alerts(due_soon_days=settings.due_soon_days)
    return AlertsResponse(alerts=[AlertSchema.from_domain(a) for a in alerts])
