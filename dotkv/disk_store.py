from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

from .errors import PersistenceFailure
from .interfaces import DocumentBackend
from .json_store import atomic_write_json, read_json
from .locks import GLOBAL_PATH_LOCKS
from .paths import ensure_dir


class DiskJsonDocumentStore(DocumentBackend):
    """
    Stores a single JSON document on disk at a fixed path.

    - Missing or blank file loads as an empty dict.
    - Invalid JSON, a non-object top level, or an OSError raise PersistenceFailure.
    - Writes atomically.
    """

    def __init__(self, path: Path | str, *, indent: int | None = 2):
        self._path = Path(path)
        self._indent = indent

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        with GLOBAL_PATH_LOCKS.hold(self._path):
            try:
                raw = read_json(self._path)
            except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
                raise PersistenceFailure("load", self._path, e) from e
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise PersistenceFailure("load", self._path, TypeError(f"top-level JSON is {type(raw).__name__}, not object"))
        return raw

    def save(self, doc: dict[str, Any]) -> None:
        with GLOBAL_PATH_LOCKS.hold(self._path):
            try:
                ensure_dir(self._path.parent)
                atomic_write_json(self._path, doc, indent=self._indent)
            except (OSError, TypeError, ValueError) as e:
                raise PersistenceFailure("save", self._path, e) from e


class MemoryDocumentStore(DocumentBackend):
    """
    Keeps the "persisted" document in process memory. Copies on the way in
    and out, so it behaves like a real backend (no shared references).
    """

    def __init__(self, initial: dict[str, Any] | None = None):
        self._doc: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self.saves = 0

    @property
    def path(self) -> Path | None:
        return None

    def load(self) -> dict[str, Any]:
        return copy.deepcopy(self._doc)

    def save(self, doc: dict[str, Any]) -> None:
        self._doc = copy.deepcopy(doc)
        self.saves += 1

    def snapshot(self) -> dict[str, Any]:
        return copy.deepcopy(self._doc)
