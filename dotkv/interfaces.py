from __future__ import annotations

from typing import Any, Protocol


class DocumentBackend(Protocol):
    """
    Durable home of a store's whole document, rewritten after every change.
    """

    def load(self) -> dict[str, Any]:
        """Load and return the full document (empty dict when nothing was saved yet)."""
        ...

    def save(self, doc: dict[str, Any]) -> None:
        """Persist the full document. Raises on failure."""
        ...
