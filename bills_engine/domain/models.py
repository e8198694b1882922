"""Domain models - pure Python dataclasses representing obligations and their projections"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, ClassVar, Dict, List, Set, Tuple

from bills_engine.domain.exceptions import ObligationValidationError

# 0.01 currency units
SETTLEMENT_EPSILON_CENTS = 1


class ObligationKind(str, Enum):
    FIXED = "FIXED"
    INSTALLMENT = "INSTALLMENT"
    DEBT = "DEBT"


class OccurrenceStatus(str, Enum):
    PAID = "PAID"
    PENDING = "PENDING"
    OVERDUE = "OVERDUE"


class AlertLevel(str, Enum):
    OVERDUE = "OVERDUE"
    DUE_TODAY = "DUE_TODAY"
    DUE_SOON = "DUE_SOON"


@dataclass(kw_only=True)
class Obligation:
    """Fields shared by every obligation kind"""

    kind: ClassVar[ObligationKind]

    id: str
    description: str
    amount_cents: int
    due_day: int
    category: str = ""
    sub_category: str = ""
    last_paid_date: datetime | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ObligationValidationError("id is required")
        if not self.description or not self.description.strip():
            raise ObligationValidationError("description is required")
        if self.amount_cents is None or self.amount_cents < 0:
            raise ObligationValidationError("amount_cents must be non-negative")
        if self.due_day is None or not 1 <= self.due_day <= 31:
            raise ObligationValidationError("due_day must be between 1 and 31")


@dataclass(kw_only=True)
class RecurringObligation(Obligation):
    """An obligation with one occurrence per calendar month (fixed bill or installment)"""

    start_date: date | None = None
    payment_history: List[datetime] = field(default_factory=list)
    exclusions: List[str] = field(default_factory=list)

    def paid_months(self) -> Set[Tuple[int, int]]:
        """(year, month) of every recorded payment; "paid" is decided by calendar month"""
        return {(paid_at.year, paid_at.month) for paid_at in self.payment_history}

    def is_excluded(self, token: str) -> bool:
        return token in self.exclusions


@dataclass(kw_only=True)
class FixedBill(RecurringObligation):
    """Recurs every month until end_date (if any)"""

    kind: ClassVar[ObligationKind] = ObligationKind.FIXED

    end_date: date | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.end_date and self.start_date and self.end_date < self.start_date:
            raise ObligationValidationError("end_date cannot be before start_date")


@dataclass(kw_only=True)
class InstallmentPlan(RecurringObligation):
    """Fixed number of monthly installments from start_date"""

    kind: ClassVar[ObligationKind] = ObligationKind.INSTALLMENT

    start_date: date
    total_installments: int
    current_installment: int = 0  # legacy counter, not read by the projector

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.start_date is None:
            raise ObligationValidationError("start_date is required for installment plans")
        if self.total_installments is None or self.total_installments < 1:
            raise ObligationValidationError("total_installments must be at least 1")


@dataclass(kw_only=True)
class Debt(Obligation):
    """
    Open-ended balance reduced by arbitrary paydowns.

    due_day is advisory only. A missing balance is treated as the full
    principal (or zero when the record is already marked settled); the
    balance is clamped into [0, amount_cents] and is_settled follows it.
    """

    kind: ClassVar[ObligationKind] = ObligationKind.DEBT

    start_date: date
    current_balance_cents: int | None = None
    is_settled: bool = False
    settled_date: datetime | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.start_date is None:
            raise ObligationValidationError("start_date is required for debts")

        if self.current_balance_cents is None:
            self.current_balance_cents = 0 if self.is_settled else self.amount_cents
        self.current_balance_cents = max(0, min(self.current_balance_cents, self.amount_cents))
        self.is_settled = self.current_balance_cents <= SETTLEMENT_EPSILON_CENTS


@dataclass
class Projection:
    """How one obligation shows up in one calendar month"""

    visible: bool
    occurrence_index: int = 0  # 1-based for installments, 0 otherwise
    is_paid_this_month: bool = False


@dataclass
class ProjectedOccurrence:
    """A visible obligation in a month view, with its derived status"""

    obligation: Obligation
    occurrence_index: int
    is_paid: bool
    status: OccurrenceStatus
    effective_due_day: int

    @property
    def is_last_installment(self) -> bool:
        return (
            isinstance(self.obligation, InstallmentPlan)
            and self.occurrence_index == self.obligation.total_installments
        )


@dataclass
class MonthlySummary:
    """Monthly totals over fixed bills and installments"""

    total_cents: int = 0
    paid_cents: int = 0
    pending_cents: int = 0
    overdue_count: int = 0


@dataclass
class LedgerTransactionRequest:
    """Expense entry handed to the external ledger; never persisted by this package"""

    description: str
    amount_cents: int
    date: datetime
    category: str
    sub_category: str
    bank: str
    payment_method: str
    type: str = "EXPENSE"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "amount_cents": self.amount_cents,
            "date": self.date.isoformat(),
            "type": self.type,
            "category": self.category,
            "sub_category": self.sub_category,
            "bank": self.bank,
            "payment_method": self.payment_method,
        }


@dataclass
class MutationResult:
    """New record states plus ledger requests produced by one user action"""

    added: List[Obligation] = field(default_factory=list)
    updated: List[Obligation] = field(default_factory=list)
    removed_ids: List[str] = field(default_factory=list)
    ledger_requests: List[LedgerTransactionRequest] = field(default_factory=list)


@dataclass
class DueAlert:
    """Unpaid occurrence in today's month that is overdue or close to its due day"""

    obligation_id: str
    description: str
    level: AlertLevel
    effective_due_day: int
    days_remaining: int
