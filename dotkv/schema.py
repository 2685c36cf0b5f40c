from __future__ import annotations

import threading
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .document import type_of
from .errors import InvalidArgument, SchemaNotFound, ValidationError

SchemaType = Literal["string", "number", "boolean", "object", "array", "null"]


class SchemaProperty(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: SchemaType | None = None


class Schema(BaseModel):
    """
    Lightweight JSON-like schema:
      {
        "type": "object",
        "required": ["id", "xp"],
        "props": { "id": {"type": "string"}, "xp": {"type": "number"} }
      }
    """

    model_config = ConfigDict(extra="forbid")

    type: SchemaType | None = None
    required: list[str] = Field(default_factory=list)
    props: dict[str, SchemaProperty] = Field(default_factory=dict)

    def check(self, value: Any, *, name: str = "") -> None:
        """Raise ValidationError for the first violation found."""
        actual = type_of(value)
        if self.type is not None and actual != self.type:
            raise ValidationError(name, None, self.type, actual)
        if self.type != "object" or not isinstance(value, Mapping):
            return
        for field in self.required:
            if field not in value:
                raise ValidationError(name, field, "present", "undefined")
        for field, prop in self.props.items():
            if prop.type is None or field not in value:
                continue
            got = type_of(value[field])
            if got != prop.type:
                raise ValidationError(name, field, prop.type, got)


class SchemaRegistry:
    """Named schemas for one store. Lives as long as the store, never persisted."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._schemas: dict[str, Schema] = {}

    def register(self, name: str, definition: Schema | Mapping[str, Any]) -> Schema:
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgument("schema name must be a non-empty string")
        if isinstance(definition, Schema):
            schema = definition
        elif isinstance(definition, Mapping):
            try:
                schema = Schema.model_validate(dict(definition))
            except PydanticValidationError as e:
                raise InvalidArgument(f"malformed schema {name!r}: {e}") from e
        else:
            raise InvalidArgument(f"schema {name!r} must be a mapping, got {type(definition).__name__}")
        with self._lock:
            self._schemas[name] = schema
        return schema

    def get(self, name: str) -> Schema:
        with self._lock:
            schema = self._schemas.get(name)
        if schema is None:
            raise SchemaNotFound(name)
        return schema

    def validate(self, name: str, value: Any) -> None:
        self.get(name).check(value, name=name)

    def names(self) -> list[str]:
        with self._lock:
            return list(self._schemas)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._schemas
