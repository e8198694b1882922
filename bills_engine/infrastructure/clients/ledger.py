"""Ledger webhook client with exponential backoff retry logic"""

import httpx
import asyncio
from typing import Dict, Any
from fastapi import BackgroundTasks
from bills_engine.config import settings
from bills_engine.domain.models import LedgerTransactionRequest
from bills_engine.infrastructure.observability.metrics import webhook_latency_histogram, webhook_failure_counter


class LedgerClient:
    """Client for delivering expense transactions to the ledger service"""

    def __init__(self, webhook_url: str | None = None, timeout: float | None = None):
        self.webhook_url = webhook_url or settings.ledger_webhook_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base

    async def send_transaction(self, payload: Dict[str, Any]) -> None:
        """
        Send one ledger transaction with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s, 16s (base^attempt)
        - Retries on HTTP errors and network failures
        - Tracks latency histogram and failure counter

        Args:
            payload: Serialized LedgerTransactionRequest
        """
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError):
                    attempt += 1
                    webhook_failure_counter.inc()

                    if attempt >= self.max_retries:
                        raise

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)


class BackgroundLedgerSink:
    """LedgerSink that queues deliveries to run after the response is sent"""

    def __init__(self, background_tasks: BackgroundTasks, client: LedgerClient):
        self.background_tasks = background_tasks
        self.client = client

    def add_transaction(self, request: LedgerTransactionRequest) -> None:
        self.background_tasks.add_task(self.client.send_transaction, request.to_payload())
