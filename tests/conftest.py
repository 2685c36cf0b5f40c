from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


from dotkv import MemoryDocumentStore, Settings, Store  # noqa: E402


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "db.json"


@pytest.fixture
def settings(db_path: Path) -> Settings:
    """
    Sweeper disabled so tests never race a background timer; TTL tests call
    sweep() or rely on lazy expiry.
    """
    return Settings(file_path=db_path, autosave=True, indent=2, sweep_interval=0)


@pytest.fixture
def store(settings: Settings, clock: FakeClock):
    s = Store(settings=settings, clock=clock)
    yield s
    s.close()


@pytest.fixture
def backend() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def mem_store(settings: Settings, backend: MemoryDocumentStore, clock: FakeClock):
    s = Store(settings=settings, backend=backend, clock=clock)
    yield s
    s.close()
