"""Payment, payoff, debt paydown and deferral endpoints"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from bills_engine.api.dependencies import get_obligation_service, get_request_id
from bills_engine.api.v1.errors import domain_errors
from bills_engine.api.v1.schemas import (
    AbatementRequest,
    DeferralRequest,
    DeferralResponse,
    ObligationResponse,
    PaymentRequest,
    SettlementRequest,
)
from bills_engine.infrastructure.database.session import get_db
from bills_engine.services.obligations import ObligationService

router = APIRouter()


@router.post("/obligations/{obligation_id}/payments", response_model=ObligationResponse)
def pay_obligation(
    obligation_id: str,
    request_body: PaymentRequest,
    request: Request,
    db: Session = Depends(get_db),
    service: ObligationService = Depends(get_obligation_service),
):
    """
    Pay one month of a fixed bill or installment plan.

    Returns 409 (already_paid) if that month already has a payment. The
    ledger transaction is delivered after the response.
    """
    with domain_errors(db, get_request_id(request)):
        obligation = service.pay(
            obligation_id,
            request_body.year,
            request_body.month,
            request_body.amount_cents,
            request_body.bank,
            request_body.payment_method,
        )
        db.commit()
    return ObligationResponse.from_domain(obligation)


@router.post("/obligations/{obligation_id}/settlement", response_model=ObligationResponse)
def settle_obligation(
    obligation_id: str,
    request_body: SettlementRequest,
    request: Request,
    db: Session = Depends(get_db),
    service: ObligationService = Depends(get_obligation_service),
):
    """Pay off every installment from the given month to the end of the plan"""
    with domain_errors(db, get_request_id(request)):
        obligation = service.settle_remaining(
            obligation_id,
            request_body.year,
            request_body.month,
            request_body.bank,
            request_body.payment_method,
            total_payoff_cents=request_body.total_payoff_cents,
        )
        db.commit()
    return ObligationResponse.from_domain(obligation)


@router.post("/obligations/{obligation_id}/abatements", response_model=ObligationResponse)
def abate_debt(
    obligation_id: str,
    request_body: AbatementRequest,
    request: Request,
    db: Session = Depends(get_db),
    service: ObligationService = Depends(get_obligation_service),
):
    with domain_errors(db, get_request_id(request)):
        obligation = service.abate_debt(
            obligation_id,
            request_body.amount_cents,
            request_body.bank,
            request_body.payment_method,
        )
        db.commit()
    return ObligationResponse.from_domain(obligation)


@router.post("/obligations/{obligation_id}/deferrals", response_model=DeferralResponse, status_code=201)
def defer_obligation(
    obligation_id: str,
    request_body: DeferralRequest,
    request: Request,
    db: Session = Depends(get_db),
    service: ObligationService = Depends(get_obligation_service),
):
    """Move this month's occurrence to next month (origin excluded, one-off copy created)"""
    with domain_errors(db, get_request_id(request)):
        result = service.defer_to_next_month(obligation_id, request_body.year, request_body.month)
        db.commit()
    return DeferralResponse(
        origin=ObligationResponse.from_domain(result.updated[0]),
        deferred=ObligationResponse.from_domain(result.added[0]),
    )
