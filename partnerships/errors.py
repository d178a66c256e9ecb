"""Error types shared by the normalizer, the parser, and the store."""
from __future__ import annotations

from typing import Any, Dict, Optional


class ValidationError(ValueError):
    """Caller-correctable input problem.

    ``field`` names the offending field when there is one; ``position`` is the
    1-based index of the first bad element of an import batch.
    """

    def __init__(self, message: str, field: Optional[str] = None, position: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.position = position

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "error",
            "message": self.message,
            "field": self.field,
            "position": self.position,
        }


class PersistenceError(RuntimeError):
    """The database file could not be read or written."""


class StoreCorruptedError(PersistenceError):
    """The database file exists but does not hold a readable document."""
