"""Dependency injection for FastAPI endpoints"""

from fastapi import BackgroundTasks, Depends, Request
from sqlalchemy.orm import Session
from bills_engine.infrastructure.clients.ledger import BackgroundLedgerSink, LedgerClient
from bills_engine.infrastructure.database.repositories import ObligationRepository
from bills_engine.infrastructure.database.session import get_db
from bills_engine.services.obligations import ObligationService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_ledger_client() -> LedgerClient:
    """Provide Ledger webhook client instance"""
    return LedgerClient()


def get_obligation_service(
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    ledger_client: LedgerClient = Depends(get_ledger_client),
) -> ObligationService:
    """Service bound to this request's session; ledger deliveries run after the response"""
    return ObligationService(
        store=ObligationRepository(db),
        ledger=BackgroundLedgerSink(background_tasks, ledger_client),
        request_id=get_request_id(request),
    )
