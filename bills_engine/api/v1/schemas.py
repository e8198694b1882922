"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import List, Optional

from bills_engine.domain.models import (
    Debt,
    DueAlert,
    FixedBill,
    InstallmentPlan,
    MonthlySummary,
    Obligation,
    ObligationKind,
    ProjectedOccurrence,
    RecurringObligation,
)


class ObligationCreateRequest(BaseModel):
    """Request body for POST /v1/obligations"""

    kind: ObligationKind
    description: str = Field(..., min_length=1)
    amount_cents: int = Field(..., ge=0, description="Per-installment amount, or plan total when amount_is_total")
    due_day: int = Field(..., ge=1, le=31)
    category: str = ""
    sub_category: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_installments: Optional[int] = Field(None, ge=1)
    amount_is_total: bool = False


class MonthRequest(BaseModel):
    year: int = Field(..., ge=1)
    month: int = Field(..., ge=1, le=12)


class PaymentRequest(MonthRequest):
    """Request body for POST /v1/obligations/{id}/payments"""

    amount_cents: int = Field(..., gt=0)
    bank: str = Field(..., min_length=1)
    payment_method: str = Field(..., min_length=1)


class SettlementRequest(MonthRequest):
    """Request body for POST /v1/obligations/{id}/settlement"""

    total_payoff_cents: Optional[int] = Field(None, gt=0, description="Defaults to remaining installments * amount")
    bank: str = Field(..., min_length=1)
    payment_method: str = Field(..., min_length=1)


class AbatementRequest(BaseModel):
    """Request body for POST /v1/obligations/{id}/abatements"""

    amount_cents: int = Field(..., gt=0)
    bank: str = Field(..., min_length=1)
    payment_method: str = Field(..., min_length=1)


class DeferralRequest(MonthRequest):
    """Request body for POST /v1/obligations/{id}/deferrals"""

    pass


class ObligationResponse(BaseModel):
    """Full obligation record"""

    id: str
    kind: ObligationKind
    description: str
    category: str
    sub_category: str
    amount_cents: int
    due_day: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_installments: Optional[int] = None
    payment_history: List[datetime] = []
    exclusions: List[str] = []
    current_balance_cents: Optional[int] = None
    is_settled: Optional[bool] = None
    settled_date: Optional[datetime] = None
    last_paid_date: Optional[datetime] = None

    @classmethod
    def from_domain(cls, obligation: Obligation) -> "ObligationResponse":
        data = dict(
            id=obligation.id,
            kind=obligation.kind,
            description=obligation.description,
            category=obligation.category,
            sub_category=obligation.sub_category,
            amount_cents=obligation.amount_cents,
            due_day=obligation.due_day,
            last_paid_date=obligation.last_paid_date,
        )
        if isinstance(obligation, RecurringObligation):
            data.update(
                start_date=obligation.start_date,
                payment_history=obligation.payment_history,
                exclusions=obligation.exclusions,
            )
        if isinstance(obligation, FixedBill):
            data["end_date"] = obligation.end_date
        if isinstance(obligation, InstallmentPlan):
            data["total_installments"] = obligation.total_installments
        if isinstance(obligation, Debt):
            data.update(
                start_date=obligation.start_date,
                current_balance_cents=obligation.current_balance_cents,
                is_settled=obligation.is_settled,
                settled_date=obligation.settled_date,
            )
        return cls(**data)


class OccurrenceSchema(BaseModel):
    """One visible obligation in a month view"""

    obligation: ObligationResponse
    occurrence_index: int
    is_paid: bool
    is_last_installment: bool
    status: str
    effective_due_day: int

    @classmethod
    def from_domain(cls, occurrence: ProjectedOccurrence) -> "OccurrenceSchema":
        return cls(
            obligation=ObligationResponse.from_domain(occurrence.obligation),
            occurrence_index=occurrence.occurrence_index,
            is_paid=occurrence.is_paid,
            is_last_installment=occurrence.is_last_installment,
            status=occurrence.status.value,
            effective_due_day=occurrence.effective_due_day,
        )


class SummarySchema(BaseModel):
    total_cents: int
    paid_cents: int
    pending_cents: int
    overdue_count: int

    @classmethod
    def from_domain(cls, summary: MonthlySummary) -> "SummarySchema":
        return cls(
            total_cents=summary.total_cents,
            paid_cents=summary.paid_cents,
            pending_cents=summary.pending_cents,
            overdue_count=summary.overdue_count,
        )


class MonthViewResponse(BaseModel):
    """Response for GET /v1/months/{year}/{month}"""

    year: int
    month: int
    occurrences: List[OccurrenceSchema]
    summary: SummarySchema


class DeferralResponse(BaseModel):
    origin: ObligationResponse
    deferred: ObligationResponse


class AlertSchema(BaseModel):
    obligation_id: str
    description: str
    level: str
    effective_due_day: int
    days_remaining: int

    @classmethod
    def from_domain(cls, alert: DueAlert) -> "AlertSchema":
        return cls(
            obligation_id=alert.obligation_id,
            description=alert.description,
            level=alert.level.value,
            effective_due_day=alert.effective_due_day,
            days_remaining=alert.days_remaining,
        )


class AlertsResponse(BaseModel):
    """Response for GET /v1/alerts"""

    alerts: List[AlertSchema]
