"""Server-side revocation of logged-out tokens.

A revoked token stays in the registry until its own expiry. Past that
point it would fail verification anyway, so the entry is dropped either
lazily when checked or by the periodic sweep.
"""

import asyncio
import threading
import time
from typing import Callable

from unidir.logging import get_logger

logger = get_logger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class RevocationRegistry:
    """Maps raw token strings to their expiry in epoch milliseconds."""

    def __init__(self, clock: Callable[[], int] = _now_ms) -> None:
        self._entries: dict[str, int] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def revoke(self, token: str, expires_at_ms: int) -> None:
        """Revoke a token until ``expires_at_ms``. Revoking twice is a no-op."""
        with self._lock:
            self._entries[token] = expires_at_ms

    def is_revoked(self, token: str) -> bool:
        """Check whether a token has been revoked.

        An entry past its expiry is removed and reported as not revoked.
        """
        with self._lock:
            expires_at = self._entries.get(token)
            if expires_at is None:
                return False
            if self._clock() > expires_at:
                del self._entries[token]
                return False
            return True

    def sweep(self) -> int:
        """Remove every expired entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            snapshot = list(self._entries.items())

        removed = 0
        for token, expires_at in snapshot:
            if self._clock() <= expires_at:
                continue
            with self._lock:
                # Re-check: the token may have been revoked again meanwhile
                current = self._entries.get(token)
                if current is not None and self._clock() > current:
                    del self._entries[token]
                    removed += 1
        return removed


class RevocationSweeper:
    """Background task that sweeps a registry on a fixed interval."""

    def __init__(self, registry: RevocationRegistry, interval_seconds: float = 3600.0) -> None:
        self._registry = registry
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            removed = self._registry.sweep()
            logger.info("revocation_sweep", removed=removed, remaining=len(self._registry))

    def start(self) -> None:
        """Start the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.debug("revocation_sweeper_started", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
