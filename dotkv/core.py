from __future__ import annotations

import copy
import logging
import threading
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Mapping

from .disk_store import DiskJsonDocumentStore
from .document import DocumentStore, Entry, as_number, flatten, strict_equal
from .errors import InvalidArgument, PersistenceFailure
from .expiry import Clock, ExpirySweeper, ExpiryTracker
from .interfaces import DocumentBackend
from .keypath import is_within, join_key, normalize_key, split_key
from .namespace import Namespace
from .schema import Schema, SchemaRegistry
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

_UNSET = object()

PersistErrorHandler = Callable[[PersistenceFailure], None]


def _check_ttl(ttl: Any) -> float | None:
    if ttl is None:
        return None
    if isinstance(ttl, bool) or not isinstance(ttl, (int, float)):
        raise InvalidArgument(f"ttl must be a number of seconds, got {type(ttl).__name__}")
    if ttl <= 0:
        raise InvalidArgument(f"ttl must be positive, got {ttl!r}")
    return float(ttl)


class Store:
    """
    A nested JSON document addressed by dotted keys ("user.profile.name"),
    kept in memory and rewritten to its backend after every change.

    Keys may carry a TTL and/or a schema name (see `set`). Expired keys are
    reclaimed lazily before every operation and periodically by a daemon
    sweeper; call `close()` (or use the store as a context manager) to stop it.

    Persistence failures never raise: they are logged, flip `persistence_ok`
    to False and are passed to `on_persist_error` when given.
    """

    def __init__(
        self,
        path: Path | str | None = None,
        *,
        settings: Settings | None = None,
        backend: DocumentBackend | None = None,
        clock: Clock | None = None,
        on_persist_error: PersistErrorHandler | None = None,
    ):
        settings = settings or get_settings()
        if path is not None:
            settings = replace(settings, file_path=Path(path))
        self._settings = settings
        self._backend = backend if backend is not None else DiskJsonDocumentStore(settings.file_path, indent=settings.indent)
        self._lock = threading.RLock()
        self._doc = DocumentStore()
        self._tracker = ExpiryTracker(clock)
        self._schemas = SchemaRegistry()
        self._on_persist_error = on_persist_error
        self._persistence_ok = True
        self._last_persist_error: PersistenceFailure | None = None
        self._sweeper: ExpirySweeper | None = None

        self._load()

        if settings.sweep_interval > 0:
            self._sweeper = ExpirySweeper(settings.sweep_interval, self.sweep)
            self._sweeper.start()

    # ----------------------
    # Lifecycle / status
    # ----------------------

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def path(self) -> Path | None:
        return getattr(self._backend, "path", None)

    @property
    def schemas(self) -> SchemaRegistry:
        return self._schemas

    @property
    def persistence_ok(self) -> bool:
        return self._persistence_ok

    @property
    def last_persist_error(self) -> PersistenceFailure | None:
        return self._last_persist_error

    @property
    def sweeping(self) -> bool:
        return self._sweeper is not None and self._sweeper.running

    def close(self) -> None:
        if self._sweeper is not None:
            self._sweeper.cancel()
            self._sweeper = None

    def __enter__(self) -> "Store":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!s})"

    # ----------------------
    # Persistence
    # ----------------------

    def _load(self) -> None:
        try:
            doc = self._backend.load()
        except Exception as e:
            failure = e if isinstance(e, PersistenceFailure) else PersistenceFailure("load", self.path, e)
            logger.warning("DOTKV LOAD: %s; starting with an empty document", failure)
            self._report(failure)
            return
        self._doc.replace(doc)
        # Creates the backing file on first start.
        self._autosave()

    def _write(self) -> bool:
        try:
            self._backend.save(self._doc.data)
        except Exception as e:
            failure = e if isinstance(e, PersistenceFailure) else PersistenceFailure("save", self.path, e)
            logger.warning("DOTKV SAVE: failed to write %s: %r", self.path, failure.cause or failure)
            self._report(failure)
            return False
        self._persistence_ok = True
        return True

    def _autosave(self) -> None:
        if self._settings.autosave:
            self._write()

    def _report(self, failure: PersistenceFailure) -> None:
        self._persistence_ok = False
        self._last_persist_error = failure
        if self._on_persist_error is None:
            return
        try:
            self._on_persist_error(failure)
        except Exception:
            logger.exception("DOTKV: on_persist_error callback failed")

    def save(self) -> bool:
        """Write the document now, even with autosave off. Returns success."""
        with self._lock:
            return self._write()

    # ----------------------
    # Expiry
    # ----------------------

    def _reclaim_expired(self) -> int:
        expired = self._tracker.expired()
        for key in expired:
            self._doc.delete(key)
            self._tracker.discard(key)
        return len(expired)

    def _expire_stale(self) -> None:
        if self._reclaim_expired():
            self._autosave()

    def sweep(self) -> int:
        """Reclaim every expired key in one batch; returns how many were removed."""
        with self._lock:
            removed = self._reclaim_expired()
            if removed:
                logger.debug("DOTKV SWEEP: reclaimed %d expired key(s)", removed)
                self._autosave()
            return removed

    def expires_at(self, key: str) -> float | None:
        """Absolute expiry timestamp of `key`, or None when it never expires."""
        full = normalize_key(key)
        with self._lock:
            self._expire_stale()
            entry = self._tracker.get(full)
            return entry.expires_at if entry is not None else None

    # ----------------------
    # Writes
    # ----------------------

    def set(self, key: str | Mapping[str, Any], value: Any = _UNSET, *, ttl: float | None = None, schema: str | None = None) -> Any:
        """
        Set a value.

        1) Key mode:
           store.set("user.name", "Aris", ttl=30, schema="name")

        2) Merge mode, deep-merges a mapping into the root:
           store.set({"user": {"name": "Aris"}, "config": {"prefix": "!"}})

        Returns what was written.
        """
        if isinstance(key, Mapping):
            if value is not _UNSET or ttl is not None or schema is not None:
                raise InvalidArgument("merge mode takes a single mapping and no ttl/schema")
            with self._lock:
                self._expire_stale()
                self._merge(key)
                self._autosave()
            return key

        if value is _UNSET:
            raise InvalidArgument("set() needs a value in key mode")
        full = normalize_key(key)
        seconds = _check_ttl(ttl)
        with self._lock:
            self._expire_stale()
            if schema is not None:
                self._schemas.validate(schema, value)
            self._detach_shadowed(full)
            self._doc.set(full, value)
            self._tracker.discard(full)
            if seconds is not None or schema is not None:
                self._tracker.track(full, ttl=seconds, schema_name=schema)
            self._autosave()
        return value

    def _rewrite(self, full: str, value: Any) -> None:
        # In-place modification: keeps the key's TTL, re-checks its schema.
        entry = self._tracker.get(full)
        if entry is not None and entry.schema_name is not None:
            self._schemas.validate(entry.schema_name, value)
        self._detach_shadowed(full)
        self._doc.set(full, value)
        self._autosave()

    def _detach_shadowed(self, full: str) -> None:
        # Writing through a tracked non-mapping replaces it with {}, so its
        # TTL/schema no longer applies to what ends up there.
        parts = split_key(full)
        for i in range(1, len(parts)):
            ancestor = join_key(*parts[:i])
            if ancestor in self._tracker and not isinstance(self._doc.lookup(ancestor), dict):
                self._tracker.discard(ancestor)

    def _merge(self, incoming: Mapping[str, Any]) -> None:
        # Merged on a copy so a schema failure leaves the document untouched.
        staged = DocumentStore(self._doc.data)
        replaced = staged.merge(incoming)
        touched = replaced + [e.key for e in flatten(incoming)]
        for entry in self._tracker.entries():
            if entry.schema_name is None or any(is_within(entry.key, r) for r in replaced):
                continue
            if any(is_within(t, entry.key) for t in touched):
                self._schemas.validate(entry.schema_name, staged.get(entry.key))
        for path in replaced:
            self._tracker.discard(path)
        self._doc = staged

    def ensure(self, key: str, default: Any) -> Any:
        full = normalize_key(key)
        with self._lock:
            self._expire_stale()
            if self._doc.has(full):
                return self._doc.get(full)
            self.set(full, default)
            return copy.deepcopy(default)

    def delete(self, key: str) -> bool:
        full = normalize_key(key)
        with self._lock:
            self._expire_stale()
            removed = self._doc.delete(full)
            self._tracker.discard(full)
            if removed:
                self._autosave()
            return removed

    def clear(self) -> None:
        with self._lock:
            self._doc.clear()
            self._tracker.clear()
            self._autosave()

    def delete_all(self) -> None:
        self.clear()

    def add(self, key: str, amount: float = 1) -> float:
        """Add to a number; absent or non-numeric values count as 0."""
        full = normalize_key(key)
        with self._lock:
            self._expire_stale()
            result = as_number(self._doc.get(full)) + as_number(amount)
            self._rewrite(full, result)
            return result

    def subtract(self, key: str, amount: float = 1) -> float:
        return self.add(key, -as_number(amount))

    def push(self, key: str, value: Any) -> list[Any]:
        """
        Append to the list at `key`. A missing or null value starts a new
        list; any other non-list value becomes the list's first element.
        """
        full = normalize_key(key)
        with self._lock:
            self._expire_stale()
            current = self._doc.get(full)
            if isinstance(current, (list, tuple)):
                items = list(current)
            elif current is None:
                items = []
            else:
                items = [current]
            items.append(copy.deepcopy(value))
            self._rewrite(full, items)
            return items

    def pull(self, key: str, value: Any) -> list[Any]:
        """
        Remove every element primitively equal to `value`. A non-list value
        is left alone and [] is returned.
        """
        full = normalize_key(key)
        with self._lock:
            self._expire_stale()
            current = self._doc.get(full)
            if not isinstance(current, (list, tuple)):
                return []
            filtered = [v for v in current if not strict_equal(v, value)]
            self._rewrite(full, filtered)
            return filtered

    # ----------------------
    # Reads
    # ----------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Deep copy of the value at `key`, or `default` when absent or expired."""
        full = normalize_key(key)
        with self._lock:
            self._expire_stale()
            return self._doc.get(full, default)

    def fetch(self, key: str, default: Any = None) -> Any:
        return self.get(key, default)

    def has(self, key: str) -> bool:
        full = normalize_key(key)
        with self._lock:
            self._expire_stale()
            return self._doc.has(full)

    def type(self, key: str) -> str:
        full = normalize_key(key)
        with self._lock:
            self._expire_stale()
            return self._doc.type(full)

    def all(self) -> dict[str, Any]:
        with self._lock:
            self._expire_stale()
            return self._doc.clone()

    def all_array(self) -> list[Entry]:
        with self._lock:
            self._expire_stale()
            return self._doc.flatten()

    def keys(self, prefix: str | None = None) -> list[str]:
        """
        Flattened keys in depth-first order. `prefix` is a plain string
        prefix, so "user" also matches "username".
        """
        entries = self.all_array()
        if isinstance(prefix, str) and prefix:
            return [e.key for e in entries if e.key.startswith(prefix)]
        return [e.key for e in entries]

    def starts_with(self, prefix: str) -> list[Entry]:
        prefix = str(prefix)
        return [e for e in self.all_array() if e.key.startswith(prefix)]

    # ----------------------
    # Schemas / namespaces
    # ----------------------

    def register_schema(self, name: str, definition: Schema | Mapping[str, Any]) -> Schema:
        """
        Register a schema for set(..., schema=name):

            store.register_schema("profile", {
                "type": "object",
                "required": ["id", "xp"],
                "props": {"id": {"type": "string"}, "xp": {"type": "number"}},
            })
        """
        return self._schemas.register(name, definition)

    def namespace(self, name: str) -> Namespace:
        return Namespace(self, name)
