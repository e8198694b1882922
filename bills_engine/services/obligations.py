"""Runs obligation mutations and applies their results through the collaborators"""

import logging
from datetime import date, datetime
from typing import List

from bills_engine.domain import mutations
from bills_engine.domain.aggregation import summarize
from bills_engine.domain.alerts import due_alerts
from bills_engine.domain.exceptions import ObligationNotFoundError, PreconditionViolation
from bills_engine.domain.models import (
    DueAlert,
    MonthlySummary,
    MutationResult,
    Obligation,
    ObligationKind,
    ProjectedOccurrence,
)
from bills_engine.domain.ports import LedgerSink, ObligationStore
from bills_engine.domain.projection import project_month
from bills_engine.infrastructure.observability.logging import log_mutation
from bills_engine.infrastructure.observability.metrics import record_mutation, record_precondition_failure

logger = logging.getLogger(__name__)


class ObligationService:
    """
    Glue between the pure domain operations and persistence/ledger collaborators.

    Every action loads the current record, runs the matching domain operation
    and applies the MutationResult: records are added/replaced/removed in the
    store first, then each ledger request is handed to the sink. Nothing is
    batched or retried; collaborator failures propagate to the caller.
    """

    def __init__(self, store: ObligationStore, ledger: LedgerSink, request_id: str | None = None):
        self.store = store
        self.ledger = ledger
        self.request_id = request_id

    # Queries

    def get(self, obligation_id: str) -> Obligation:
        obligation = self.store.get(obligation_id)
        if obligation is None:
            raise ObligationNotFoundError(f"Obligation {obligation_id} not found")
        return obligation

    def month_view(
        self, year: int, month: int, today: date | None = None
    ) -> tuple[List[ProjectedOccurrence], MonthlySummary]:
        obligations = self.store.list_all()
        return project_month(obligations, year, month, today), summarize(obligations, year, month, today)

    def alerts(self, today: date | None = None, due_soon_days: int = 3) -> List[DueAlert]:
        return due_alerts(self.store.list_all(), today, due_soon_days)

    # Commands

    def create(self, kind: ObligationKind | str, **fields) -> Obligation:
        result = mutations.create_obligation(kind, **fields)
        self._apply("create", result)
        return result.added[0]

    def pay(
        self,
        obligation_id: str,
        year: int,
        month: int,
        paid_amount_cents: int,
        bank: str,
        method: str,
        now: datetime | None = None,
    ) -> Obligation:
        obligation = self.get(obligation_id)
        result = self._run(mutations.pay, obligation, year, month, paid_amount_cents, bank, method, now=now)
        self._apply("pay", result)
        return result.updated[0]

    def settle_remaining(
        self,
        obligation_id: str,
        year: int,
        month: int,
        bank: str,
        method: str,
        total_payoff_cents: int | None = None,
        now: datetime | None = None,
    ) -> Obligation:
        obligation = self.get(obligation_id)
        result = self._run(
            mutations.settle_remaining,
            obligation,
            year,
            month,
            bank,
            method,
            total_payoff_cents=total_payoff_cents,
            now=now,
        )
        self._apply("settle_remaining", result)
        return result.updated[0]

    def abate_debt(
        self,
        obligation_id: str,
        paid_amount_cents: int,
        bank: str,
        method: str,
        now: datetime | None = None,
    ) -> Obligation:
        obligation = self.get(obligation_id)
        result = self._run(mutations.abate_debt, obligation, paid_amount_cents, bank, method, now=now)
        self._apply("abate_debt", result)
        return result.updated[0]

    def defer_to_next_month(self, obligation_id: str, year: int, month: int) -> MutationResult:
        obligation = self.get(obligation_id)
        result = self._run(mutations.defer_to_next_month, obligation, year, month)
        self._apply("defer_to_next_month", result)
        return result

    def delete_occurrence(self, obligation_id: str, year: int, month: int) -> Obligation:
        obligation = self.get(obligation_id)
        result = self._run(mutations.delete_occurrence, obligation, year, month)
        self._apply("delete_occurrence", result)
        return result.updated[0]

    def delete_all(self, obligation_id: str) -> None:
        obligation = self.get(obligation_id)
        self._apply("delete_all", mutations.delete_all(obligation), kind=obligation.kind.value)

    def _run(self, operation, *args, **kwargs) -> MutationResult:
        try:
            return operation(*args, **kwargs)
        except PreconditionViolation as e:
            record_precondition_failure(e.code)
            logger.warning(
                f"Mutation rejected: {e}",
                extra={"request_id": self.request_id, "operation": operation.__name__, "code": e.code},
            )
            raise

    def _apply(self, operation: str, result: MutationResult, kind: str | None = None) -> None:
        for obligation in result.updated:
            self.store.update(obligation)
        for obligation in result.added:
            self.store.add(obligation)
        for obligation_id in result.removed_ids:
            self.store.remove(obligation_id)
        for request in result.ledger_requests:
            self.ledger.add_transaction(request)

        touched = result.updated or result.added
        subject = touched[0] if touched else None
        kind = kind or (subject.kind.value if subject else "unknown")
        obligation_id = subject.id if subject else ",".join(result.removed_ids)

        record_mutation(operation, kind)
        log_mutation(operation, obligation_id, kind, len(result.ledger_requests), self.request_id)
