from __future__ import annotations

from pathlib import Path
from typing import Any


class DotKVError(Exception):
    """Base class for every error raised by dotkv."""


class InvalidKey(DotKVError, TypeError):
    def __init__(self, key: Any, reason: str = "key must be a non-empty string"):
        self.key = key
        super().__init__(f"{reason} (got {key!r})")


class InvalidArgument(DotKVError, ValueError):
    pass


class SchemaNotFound(DotKVError, KeyError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"schema not registered: {self.name!r}"


class ValidationError(DotKVError, ValueError):
    """
    Raised on the first schema violation found in a value.

    `field` is None when the top-level type is wrong.
    """

    def __init__(self, schema: str, field: str | None, expected: str, actual: str):
        self.schema = schema
        self.field = field
        self.expected = expected
        self.actual = actual
        where = "value" if field is None else f"field {field!r}"
        super().__init__(f"schema {schema!r}: {where} expected {expected}, got {actual}")


class PersistenceFailure(DotKVError):
    def __init__(self, operation: str, path: Path | None, cause: BaseException | None = None):
        self.operation = operation
        self.path = path
        self.cause = cause
        target = str(path) if path is not None else "<backend>"
        detail = f": {cause!r}" if cause is not None else ""
        super().__init__(f"failed to {operation} {target}{detail}")
