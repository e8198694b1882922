"""Collaborator interfaces the service layer writes through"""

from typing import List, Optional, Protocol

from bills_engine.domain.models import LedgerTransactionRequest, Obligation


class ObligationStore(Protocol):
    """Persists whole obligation records; update replaces by id"""

    def add(self, obligation: Obligation) -> None:  # pragma: no cover - interface
        ...

    def update(self, obligation: Obligation) -> None:  # pragma: no cover - interface
        ...

    def remove(self, obligation_id: str) -> None:  # pragma: no cover - interface
        ...

    def get(self, obligation_id: str) -> Optional[Obligation]:  # pragma: no cover - interface
        ...

    def list_all(self) -> List[Obligation]:  # pragma: no cover - interface
        ...


class LedgerSink(Protocol):
    """Accepts expense entries produced by mutations"""

    def add_transaction(self, request: LedgerTransactionRequest) -> None:  # pragma: no cover - interface
        ...
