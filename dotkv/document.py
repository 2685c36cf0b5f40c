from __future__ import annotations

import copy
from typing import Any, Iterable, Mapping, NamedTuple

from .keypath import join_key, resolve, resolve_for_write, split_key

_MISSING = object()

_CONTAINERS = ("object", "array")


class Entry(NamedTuple):
    key: str
    value: Any


def type_of(value: Any) -> str:
    if value is _MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def as_number(value: Any) -> int | float:
    """Numbers pass through; anything else (bools included) counts as 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def strict_equal(a: Any, b: Any) -> bool:
    """
    Primitive equality: numbers compare by value, other scalars need the same
    type, containers never match.
    """
    ta, tb = type_of(a), type_of(b)
    if ta in _CONTAINERS or tb in _CONTAINERS:
        return False
    if ta != tb:
        return False
    return a == b


def deep_merge(target: dict[str, Any], source: Mapping[str, Any], prefix: str = "") -> list[str]:
    """
    Merge `source` into `target` in place. Returns the full keys whose old
    value was replaced outright rather than merged into.
    """
    replaced: list[str] = []
    for k, v in source.items():
        full = join_key(prefix, str(k))
        existing = target.get(k)
        if isinstance(v, Mapping):
            if not isinstance(existing, dict):
                if k in target:
                    replaced.append(full)
                existing = {}
                target[k] = existing
            replaced.extend(deep_merge(existing, v, full))
        else:
            if k in target:
                replaced.append(full)
            target[k] = copy.deepcopy(v)
    return replaced


def flatten(node: Mapping[str, Any], prefix: str = "") -> list[Entry]:
    """
    Depth-first (key, value) leaves of a tree. Lists are leaves and empty
    mappings produce no entries.
    """
    out: list[Entry] = []
    for k, v in node.items():
        full = join_key(prefix, str(k))
        if isinstance(v, Mapping):
            out.extend(flatten(v, full))
        else:
            out.append(Entry(full, v))
    return out


def unflatten(entries: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    root: dict[str, Any] = {}
    for key, value in entries:
        parent, last = resolve_for_write(root, key)
        parent[last] = copy.deepcopy(value)
    return root


class DocumentStore:
    """
    The in-memory nested mapping behind a store.

    Reads hand out deep copies and writes store deep copies, so callers never
    share references with the tree.
    """

    def __init__(self, data: Mapping[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(dict(data)) if data else {}

    @property
    def data(self) -> dict[str, Any]:
        # live tree; only the owning store and backends should touch this
        return self._data

    def lookup(self, key: str) -> Any:
        node: Any = self._data
        for p in split_key(key):
            if not isinstance(node, dict) or p not in node:
                return _MISSING
            node = node[p]
        return node

    def get(self, key: str, default: Any = None) -> Any:
        value = self.lookup(key)
        if value is _MISSING:
            return default
        return copy.deepcopy(value)

    def has(self, key: str) -> bool:
        return self.lookup(key) is not _MISSING

    def type(self, key: str) -> str:
        return type_of(self.lookup(key))

    def set(self, key: str, value: Any) -> None:
        parent, last = resolve_for_write(self._data, key)
        parent[last] = copy.deepcopy(value)

    def merge(self, incoming: Mapping[str, Any]) -> list[str]:
        return deep_merge(self._data, incoming)

    def delete(self, key: str) -> bool:
        ref = resolve(self._data, key, create_missing=False)
        if ref is None:
            return False
        parent, last = ref
        if last not in parent:
            return False
        del parent[last]
        return True

    def flatten(self) -> list[Entry]:
        return [Entry(e.key, copy.deepcopy(e.value)) for e in flatten(self._data)]

    def clone(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)

    def replace(self, data: Mapping[str, Any]) -> None:
        self._data = copy.deepcopy(dict(data))

    def clear(self) -> None:
        self._data = {}
