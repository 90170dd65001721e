"""
Persistence sync.

Forwards records changed by a use case to the persistence collaborator.
A failed write never undoes or blocks the in-memory transition: it is
logged, kept for a later retry, and reported to failure listeners.
"""

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.config import get_logger
from src.core.entities.customer import Customer
from src.core.entities.product import Product, utcnow
from src.core.entities.sale import Sale
from src.core.interfaces.persistence import IPersistence

logger = get_logger(__name__)


@dataclass
class SyncFailure:
    """A persistence write that did not go through."""

    operation: str
    error: str
    attempts: int
    occurred_at: datetime = field(default_factory=utcnow)


@dataclass
class _PendingWrite:
    """One write, holding a snapshot per record key (``product:<id>`` etc.)."""

    name: str
    records: dict[str, Any]
    writer: Callable[[list[Any]], Awaitable[None]]
    seq: int
    batch: bool
    attempts: int = 0

    @property
    def operation(self) -> str:
        if self.batch:
            return f"{self.name}:{len(self.records)}"
        return f"{self.name}:{next(iter(self.records)).split(':', 1)[1]}"


FailureListener = Callable[[SyncFailure], None]


class PersistenceSync:
    """
    Write-behind channel from the in-memory state to persistence.

    Writes run one at a time in submission order. Every record snapshot
    carries the sequence number of the write that took it; a queued
    snapshot is discarded as soon as a newer write covers the same record,
    so a retry never puts an older row back over a newer one.
    """

    def __init__(
        self,
        persistence: IPersistence,
        background: bool = False,
        max_pending: int = 500,
    ) -> None:
        self._persistence = persistence
        self._background = background
        self._max_pending = max_pending
        self._pending: deque[_PendingWrite] = deque()
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[FailureListener] = []
        self._last_failure: SyncFailure | None = None
        self._write_lock = asyncio.Lock()
        self._seq = 0
        # record key -> seq of the newest write not yet known to be stored
        self._latest: dict[str, int] = {}

    @property
    def persistence(self) -> IPersistence:
        return self._persistence

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def pending_operations(self) -> list[str]:
        return [w.operation for w in self._pending]

    @property
    def last_failure(self) -> SyncFailure | None:
        return self._last_failure

    def add_listener(self, listener: FailureListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: FailureListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # =========================================================================
    # Writes
    # =========================================================================

    async def save_product(self, product: Product) -> None:
        await self._submit(
            "save_product",
            "product",
            [product],
            lambda records: self._persistence.save_product(records[0]),
        )

    async def save_products(self, products: list[Product]) -> None:
        if not products:
            return
        await self._submit(
            "save_products",
            "product",
            products,
            self._persistence.save_products,
            batch=True,
        )

    async def save_sales(self, sales: list[Sale]) -> None:
        if not sales:
            return
        await self._submit("save_sales", "sale", sales, self._persistence.save_sales, batch=True)

    async def save_customer(self, customer: Customer) -> None:
        await self._submit(
            "save_customer",
            "customer",
            [customer],
            lambda records: self._persistence.save_customer(records[0]),
        )

    # =========================================================================
    # Recovery
    # =========================================================================

    async def retry_failed(self) -> int:
        """Replay queued writes once. Returns how many succeeded."""
        self._discard_superseded()
        queued = list(self._pending)
        self._pending.clear()
        succeeded = 0
        for pending in queued:
            if await self._run(pending):
                succeeded += 1
        logger.info(
            "persistence_retry_complete",
            attempted=len(queued),
            succeeded=succeeded,
            still_pending=len(self._pending),
        )
        return succeeded

    async def flush(self) -> None:
        """Wait for every background write started so far."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # =========================================================================
    # Internals
    # =========================================================================

    async def _submit(
        self,
        name: str,
        kind: str,
        records: list[Product] | list[Sale] | list[Customer],
        writer: Callable[[list[Any]], Awaitable[None]],
        batch: bool = False,
    ) -> None:
        self._seq += 1
        pending = _PendingWrite(
            name=name,
            records={f"{kind}:{r.id}": r.model_copy(deep=True) for r in records},
            writer=writer,
            seq=self._seq,
            batch=batch,
        )
        for key in pending.records:
            self._latest[key] = pending.seq
        self._discard_superseded()

        if not self._background:
            await self._run(pending)
            return

        task = asyncio.create_task(self._run(pending))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _is_stale(self, key: str, pending: _PendingWrite) -> bool:
        return self._latest.get(key, 0) > pending.seq

    def _discard_superseded(self) -> None:
        kept: deque[_PendingWrite] = deque()
        for pending in self._pending:
            stale = [key for key in pending.records if self._is_stale(key, pending)]
            for key in stale:
                del pending.records[key]
            if stale:
                logger.info(
                    "persistence_retry_superseded",
                    operation=pending.name,
                    records=stale,
                )
            if pending.records:
                kept.append(pending)
        self._pending = kept

    async def _run(self, pending: _PendingWrite) -> bool:
        async with self._write_lock:
            pending.attempts += 1
            try:
                await pending.writer(list(pending.records.values()))
            except Exception as e:
                self._record_failure(pending, e)
                return False

        for key in pending.records:
            if self._latest.get(key) == pending.seq:
                del self._latest[key]
        logger.debug(
            "persistence_write_ok",
            operation=pending.operation,
            attempts=pending.attempts,
        )
        return True

    def _record_failure(self, pending: _PendingWrite, error: Exception) -> None:
        operation = pending.operation
        logger.error(
            "persistence_write_failed",
            operation=operation,
            attempts=pending.attempts,
            error=str(error),
        )

        for key in [k for k in pending.records if self._is_stale(k, pending)]:
            del pending.records[key]
        if pending.records:
            if self._pending and len(self._pending) >= self._max_pending:
                dropped = self._pending.popleft()
                logger.warning("persistence_retry_dropped", operation=dropped.operation)
            self._pending.append(pending)

        failure = SyncFailure(
            operation=operation,
            error=str(error),
            attempts=pending.attempts,
        )
        self._last_failure = failure
        for listener in list(self._listeners):
            try:
                listener(failure)
            except Exception as e:
                logger.warning("sync_listener_failed", error=str(e))
