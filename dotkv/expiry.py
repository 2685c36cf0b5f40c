from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from pydantic import BaseModel

from .keypath import is_within

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class ExpiryEntry(BaseModel):
    """
    Per-key metadata kept beside the document, never persisted.

    expires_at=None means the key is tracked only for its schema.
    """

    key: str
    expires_at: float | None = None
    schema_name: str | None = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and self.expires_at <= now


class ExpiryTracker:
    def __init__(self, clock: Clock | None = None):
        self._clock = clock or time.time
        self._entries: dict[str, ExpiryEntry] = {}

    def now(self) -> float:
        return self._clock()

    def track(self, key: str, *, ttl: float | None = None, schema_name: str | None = None) -> ExpiryEntry:
        expires_at = self.now() + ttl if ttl is not None else None
        entry = ExpiryEntry(key=key, expires_at=expires_at, schema_name=schema_name)
        self._entries[key] = entry
        return entry

    def get(self, key: str) -> ExpiryEntry | None:
        return self._entries.get(key)

    def discard(self, key: str) -> int:
        """Drop the entry for `key` and for every key nested below it."""
        doomed = [k for k in self._entries if is_within(k, key)]
        for k in doomed:
            del self._entries[k]
        return len(doomed)

    def entries(self) -> list[ExpiryEntry]:
        return list(self._entries.values())

    def expired(self, now: float | None = None) -> list[str]:
        ts = self.now() if now is None else now
        return [k for k, e in self._entries.items() if e.is_expired(ts)]

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class ExpirySweeper:
    """
    Calls `callback` every `interval` seconds on a daemon timer thread until
    cancelled. Errors from the callback are logged and the schedule continues.
    """

    def __init__(self, interval: float, callback: Callable[[], object], *, name: str = "dotkv-sweeper"):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._interval = interval
        self._callback = callback
        self._name = name
        self._guard = threading.Lock()
        self._timer: threading.Timer | None = None
        self._cancelled = False

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        with self._guard:
            return self._timer is not None and not self._cancelled

    def start(self) -> None:
        with self._guard:
            self._cancelled = False
            self._schedule_locked()

    def cancel(self) -> None:
        with self._guard:
            self._cancelled = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _schedule_locked(self) -> None:
        timer = threading.Timer(self._interval, self._run)
        timer.daemon = True
        timer.name = self._name
        self._timer = timer
        timer.start()

    def _run(self) -> None:
        with self._guard:
            if self._cancelled:
                return
        try:
            self._callback()
        except Exception as e:
            logger.warning("DOTKV SWEEP: sweep failed: %r", e)
        with self._guard:
            if not self._cancelled:
                self._schedule_locked()
