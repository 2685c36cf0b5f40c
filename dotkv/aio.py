from __future__ import annotations

import asyncio
from typing import Any, Mapping

from .core import Store
from .document import Entry
from .namespace import Namespace
from .schema import Schema


class AsyncStore:
    """
    Async wrapper around a Store.
    Uses asyncio.to_thread so the event loop never blocks on file I/O.
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    @classmethod
    def open(cls, *args: Any, **kwargs: Any) -> "AsyncStore":
        return cls(Store(*args, **kwargs))

    @property
    def store(self) -> Store:
        return self._store

    async def set(self, key: str | Mapping[str, Any], *args: Any, **kwargs: Any) -> Any:
        return await asyncio.to_thread(self._store.set, key, *args, **kwargs)

    async def get(self, key: str, default: Any = None) -> Any:
        return await asyncio.to_thread(self._store.get, key, default)

    async def fetch(self, key: str, default: Any = None) -> Any:
        return await self.get(key, default)

    async def has(self, key: str) -> bool:
        return await asyncio.to_thread(self._store.has, key)

    async def ensure(self, key: str, default: Any) -> Any:
        return await asyncio.to_thread(self._store.ensure, key, default)

    async def delete(self, key: str) -> bool:
        return await asyncio.to_thread(self._store.delete, key)

    async def clear(self) -> None:
        await asyncio.to_thread(self._store.clear)

    async def delete_all(self) -> None:
        await self.clear()

    async def add(self, key: str, amount: float = 1) -> float:
        return await asyncio.to_thread(self._store.add, key, amount)

    async def subtract(self, key: str, amount: float = 1) -> float:
        return await asyncio.to_thread(self._store.subtract, key, amount)

    async def push(self, key: str, value: Any) -> list[Any]:
        return await asyncio.to_thread(self._store.push, key, value)

    async def pull(self, key: str, value: Any) -> list[Any]:
        return await asyncio.to_thread(self._store.pull, key, value)

    async def all(self) -> dict[str, Any]:
        return await asyncio.to_thread(self._store.all)

    async def all_array(self) -> list[Entry]:
        return await asyncio.to_thread(self._store.all_array)

    async def keys(self, prefix: str | None = None) -> list[str]:
        return await asyncio.to_thread(self._store.keys, prefix)

    async def starts_with(self, prefix: str) -> list[Entry]:
        return await asyncio.to_thread(self._store.starts_with, prefix)

    async def type(self, key: str) -> str:
        return await asyncio.to_thread(self._store.type, key)

    async def sweep(self) -> int:
        return await asyncio.to_thread(self._store.sweep)

    async def save(self) -> bool:
        return await asyncio.to_thread(self._store.save)

    def register_schema(self, name: str, definition: Schema | Mapping[str, Any]) -> Schema:
        # in-memory only, no I/O
        return self._store.register_schema(name, definition)

    def namespace(self, name: str) -> Namespace:
        return self._store.namespace(name)

    async def close(self) -> None:
        self._store.close()

    async def __aenter__(self) -> "AsyncStore":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
