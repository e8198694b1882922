"""Translation of domain exceptions into HTTP errors"""

import logging
from contextlib import contextmanager
from fastapi import HTTPException
from sqlalchemy.orm import Session

from bills_engine.domain.exceptions import (
    ObligationNotFoundError,
    ObligationValidationError,
    PreconditionViolation,
)


@contextmanager
def domain_errors(db: Session, request_id: str):
    """Roll back the session and map domain failures to 404/409/422"""
    try:
        yield
    except ObligationNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    except ObligationValidationError as e:
        db.rollback()
        logging.warning(f"Validation failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except PreconditionViolation as e:
        db.rollback()
        raise HTTPException(status_code=409, detail={"message": str(e), "code": e.code})
