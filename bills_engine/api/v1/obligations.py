"""Obligation records: create, fetch, delete"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session
from typing import Optional

from bills_engine.api.dependencies import get_obligation_service, get_request_id
from bills_engine.api.v1.errors import domain_errors
from bills_engine.api.v1.schemas import ObligationCreateRequest, ObligationResponse
from bills_engine.infrastructure.database.session import get_db
from bills_engine.services.obligations import ObligationService

router = APIRouter()


@router.post("/obligations", response_model=ObligationResponse, status_code=201)
def create_obligation(
    request_body: ObligationCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    service: ObligationService = Depends(get_obligation_service),
):
    """
    Create a fixed bill, installment plan or debt.

    Installment plans may be entered as a total value (amount_is_total);
    the stored amount is then the per-installment share.
    """
    with domain_errors(db, get_request_id(request)):
        obligation = service.create(**request_body.model_dump())
        db.commit()
    return ObligationResponse.from_domain(obligation)


@router.get("/obligations/{obligation_id}", response_model=ObligationResponse)
def get_obligation(
    obligation_id: str,
    request: Request,
    db: Session = Depends(get_db),
    service: ObligationService = Depends(get_obligation_service),
):
    with domain_errors(db, get_request_id(request)):
        obligation = service.get(obligation_id)
    return ObligationResponse.from_domain(obligation)


@router.delete("/obligations/{obligation_id}")
def delete_obligation(
    obligation_id: str,
    request: Request,
    year: Optional[int] = Query(None, ge=1),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
    service: ObligationService = Depends(get_obligation_service),
):
    """
    Delete one month's occurrence (year and month given) or the whole record.

    Debts only support deleting the whole record. Passing only one of year
    and month is rejected rather than read as a whole-record delete.
    """
    if (year is None) != (month is None):
        raise HTTPException(status_code=422, detail="year and month must be given together")

    with domain_errors(db, get_request_id(request)):
        if year is not None:
            obligation = service.delete_occurrence(obligation_id, year, month)
            db.commit()
            return ObligationResponse.from_domain(obligation)

        service.delete_all(obligation_id)
        db.commit()
    return Response(status_code=204)
