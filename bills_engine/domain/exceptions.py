"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ObligationValidationError(DomainException):
    """Obligation fields are missing or invalid for the chosen kind"""

    pass


class InvalidMonthError(ObligationValidationError, ValueError):
    """Year or month outside the calendar (months are 1-12)"""

    pass


class ObligationNotFoundError(DomainException):
    """No obligation with the given id exists in the store"""

    pass


class PreconditionViolation(DomainException):
    """A mutation was requested in a state that does not allow it"""

    code = "precondition_violation"


class AlreadyPaidError(PreconditionViolation):
    """The occurrence for the requested month is already paid"""

    code = "already_paid"


class NothingToSettleError(PreconditionViolation):
    """No installments remain open from the requested month onward"""

    code = "nothing_to_settle"


class DebtAlreadySettledError(PreconditionViolation):
    """The debt balance has already reached zero"""

    code = "debt_already_settled"


class NotVisibleError(PreconditionViolation):
    """The obligation has no occurrence in the requested month"""

    code = "not_visible"


class UnsupportedOperationError(PreconditionViolation):
    """The operation does not apply to this obligation kind"""

    code = "unsupported_operation"
