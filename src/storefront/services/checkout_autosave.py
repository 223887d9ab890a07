from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import Any

from pydantic import ValidationError

from storefront.core.metrics import AUTOSAVE_FLUSHES
from storefront.domain.models import CheckoutDraft
from storefront.services.safe_storage import SafeStorage

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 1.0


class AutoSaveState(StrEnum):
    IDLE = "idle"
    PENDING = "pending"


class CheckoutAutoSave:
    """
    Trailing-edge debounced persistence of the checkout form.

    `save()` collects partial updates and (re)arms a single timer; the merged
    update is written once the form has been quiet for `delay_seconds`.
    At most one flush is scheduled at any time. Callers that leave the
    checkout before the timer fires should `await flush()`.
    """

    def __init__(
        self,
        storage: SafeStorage,
        storage_key: str,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
    ) -> None:
        self._storage = storage
        self._key = storage_key
        self._delay = delay_seconds
        self._pending: dict[str, Any] = {}
        self._timer: asyncio.Task[None] | None = None
        # Serializes read-merge-write against clear(); held for the whole write
        self._write_lock = asyncio.Lock()

    @property
    def state(self) -> AutoSaveState:
        if self._timer is not None and not self._timer.done():
            return AutoSaveState.PENDING
        return AutoSaveState.IDLE

    @property
    def pending_fields(self) -> dict[str, Any]:
        return dict(self._pending)

    def save(self, partial: CheckoutDraft | dict[str, Any]) -> None:
        """Queues a partial update (fire-and-forget). Needs a running event loop."""
        if not isinstance(partial, CheckoutDraft):
            partial = CheckoutDraft.model_validate(partial)
        self._pending.update(partial.changed_fields())
        self._cancel_timer()
        self._timer = asyncio.get_running_loop().create_task(self._flush_later())

    async def flush(self) -> None:
        """Writes pending changes immediately instead of waiting for the timer."""
        self._cancel_timer()
        await self._write_pending()

    async def load(self) -> CheckoutDraft:
        result = await self._storage.get_json(self._key)
        if not result.ok or result.value is None:
            return CheckoutDraft()
        if not isinstance(result.value, dict):
            logger.warning("Ignoring checkout draft under %s: expected a JSON object", self._key)
            return CheckoutDraft()
        try:
            return CheckoutDraft.model_validate(result.value)
        except ValidationError:
            logger.warning("Ignoring malformed checkout draft under %s", self._key)
            return CheckoutDraft()

    async def clear(self) -> None:
        """Drops pending changes and the persisted draft, e.g. after the order was placed."""
        self._cancel_timer()
        self._pending = {}
        async with self._write_lock:
            await self._storage.remove(self._key)

    async def aclose(self) -> None:
        await self.flush()

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _flush_later(self) -> None:
        await asyncio.sleep(self._delay)
        # Detach first: a save() arriving during the write must not cancel it.
        # The write itself is still tracked through _write_lock.
        self._timer = None
        await self._write_pending()

    async def _write_pending(self) -> None:
        async with self._write_lock:
            if not self._pending:
                return
            pending, self._pending = self._pending, {}
            existing = await self.load()
            merged = {**existing.changed_fields(), **pending}
            result = await self._storage.set_json(self._key, merged)
        AUTOSAVE_FLUSHES.labels(outcome="ok" if result.ok else "error").inc()
        if not result.ok:
            logger.error("Checkout draft could not be saved, %d field(s) lost", len(pending))
