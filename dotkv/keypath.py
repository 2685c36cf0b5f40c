from __future__ import annotations

from typing import Any

from .errors import InvalidKey

SEPARATOR = "."


def split_key(key: Any) -> list[str]:
    """
    Split a dotted key into path segments, dropping empty ones.

    "a..b" and ".a.b." both give ["a", "b"].
    """
    if not isinstance(key, str):
        raise InvalidKey(key)
    parts = [p for p in key.split(SEPARATOR) if p]
    if not parts:
        raise InvalidKey(key)
    return parts


def normalize_key(key: Any) -> str:
    return SEPARATOR.join(split_key(key))


def join_key(*parts: str) -> str:
    return SEPARATOR.join(p for p in parts if p)


def is_within(key: str, ancestor: str) -> bool:
    """True when `key` is `ancestor` itself or nested somewhere below it."""
    return key == ancestor or key.startswith(ancestor + SEPARATOR)


def resolve(root: dict[str, Any], key: Any, create_missing: bool) -> tuple[dict[str, Any], str] | None:
    """
    Locate the mapping that holds the last segment of `key`.

    With create_missing, absent or non-mapping intermediates are replaced by
    fresh dicts (whatever was there is lost). Without it, they make the
    lookup return None.
    """
    if create_missing:
        return resolve_for_write(root, key)
    parts = split_key(key)
    node = root
    for p in parts[:-1]:
        child = node.get(p)
        if not isinstance(child, dict):
            return None
        node = child
    return node, parts[-1]


def resolve_for_write(root: dict[str, Any], key: Any) -> tuple[dict[str, Any], str]:
    """
    Like resolve(..., create_missing=True), which never misses: absent or
    non-mapping intermediates become fresh dicts.
    """
    parts = split_key(key)
    node = root
    for p in parts[:-1]:
        child = node.get(p)
        if not isinstance(child, dict):
            child = {}
            node[p] = child
        node = child
    return node, parts[-1]
