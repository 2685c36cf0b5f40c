from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from .document import Entry, unflatten
from .errors import InvalidArgument, InvalidKey
from .keypath import SEPARATOR, normalize_key, split_key

_UNSET = object()

if TYPE_CHECKING:
    from .core import Store


class Namespace:
    """
    A view of a store scoped under "name.*".

        guilds = store.namespace("guilds")
        guilds.set("123.premium", True)   # root key "guilds.123.premium"
        guilds.keys()                      # ["123.premium"]

    Holds no data of its own; every call goes to the underlying store.
    """

    def __init__(self, store: "Store", name: str):
        if not isinstance(name, str):
            raise InvalidArgument("namespace name must be a string")
        try:
            self._name = normalize_key(name)
        except InvalidKey as e:
            raise InvalidArgument(f"namespace name must be non-empty, got {name!r}") from e
        self._store = store
        self._prefix = self._name + SEPARATOR

    @property
    def name(self) -> str:
        return self._name

    def _key(self, key: str) -> str:
        if not isinstance(key, str):
            raise InvalidKey(key)
        return self._prefix + normalize_key(key)

    def _strip(self, key: str) -> str:
        return key[len(self._prefix):] if key.startswith(self._prefix) else key

    def __repr__(self) -> str:
        return f"Namespace({self._name!r})"

    def set(self, key: str | Mapping[str, Any], value: Any = _UNSET, *, ttl: float | None = None, schema: str | None = None) -> Any:
        if isinstance(key, Mapping):
            if value is not _UNSET or ttl is not None or schema is not None:
                raise InvalidArgument("merge mode takes a single mapping and no ttl/schema")
            wrapped: dict[str, Any] = dict(key)
            for part in reversed(split_key(self._name)):
                wrapped = {part: wrapped}
            self._store.set(wrapped)
            return key
        if value is _UNSET:
            raise InvalidArgument("set() needs a value in key mode")
        return self._store.set(self._key(key), value, ttl=ttl, schema=schema)

    def get(self, key: str, default: Any = None) -> Any:
        return self._store.get(self._key(key), default)

    def fetch(self, key: str, default: Any = None) -> Any:
        return self.get(key, default)

    def has(self, key: str) -> bool:
        return self._store.has(self._key(key))

    def ensure(self, key: str, default: Any) -> Any:
        return self._store.ensure(self._key(key), default)

    def delete(self, key: str) -> bool:
        return self._store.delete(self._key(key))

    def add(self, key: str, amount: float = 1) -> float:
        return self._store.add(self._key(key), amount)

    def subtract(self, key: str, amount: float = 1) -> float:
        return self._store.subtract(self._key(key), amount)

    def push(self, key: str, value: Any) -> list[Any]:
        return self._store.push(self._key(key), value)

    def pull(self, key: str, value: Any) -> list[Any]:
        return self._store.pull(self._key(key), value)

    def type(self, key: str) -> str:
        return self._store.type(self._key(key))

    def all_array(self) -> list[Entry]:
        return [Entry(self._strip(e.key), e.value) for e in self._store.starts_with(self._prefix)]

    def all(self) -> dict[str, Any]:
        # Rebuilt from the flat entries rather than sliced out of the root tree.
        return unflatten(self.all_array())

    def keys(self, prefix: str | None = None) -> list[str]:
        inner = [e.key for e in self.all_array()]
        if isinstance(prefix, str) and prefix:
            return [k for k in inner if k.startswith(prefix)]
        return inner

    def starts_with(self, prefix: str) -> list[Entry]:
        prefix = str(prefix)
        return [e for e in self.all_array() if e.key.startswith(prefix)]

    def clear(self) -> bool:
        return self._store.delete(self._name)

    def namespace(self, name: str) -> "Namespace":
        try:
            inner = normalize_key(name)
        except InvalidKey as e:
            raise InvalidArgument(f"namespace name must be non-empty, got {name!r}") from e
        return Namespace(self._store, self._prefix + inner)
