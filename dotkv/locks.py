from __future__ import annotations

import contextlib
import os
import threading
from pathlib import Path
from typing import Iterator


class PathLockRegistry:
    """
    One lock per resolved file path. Backends opened on the same JSON file
    (even via different spellings of the path) serialize against each other.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, path: Path | str) -> threading.Lock:
        key = os.path.normcase(str(Path(path).resolve()))
        with self._guard:
            return self._locks.setdefault(key, threading.Lock())

    @contextlib.contextmanager
    def hold(self, path: Path | str) -> Iterator[None]:
        with self.lock_for(path):
            yield


GLOBAL_PATH_LOCKS = PathLockRegistry()
