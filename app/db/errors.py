from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Failure categories reported by the persistence layer."""

    VALIDATION = "validation"
    CAST = "cast"
    OTHER = "other"


class PersistenceError(Exception):
    """Raised by the book store for every failure it reports.

    ``field_errors`` maps field names to messages for ``VALIDATION``
    failures. ``field`` and ``value`` name the offending input for
    ``CAST`` failures.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        field_errors: Optional[Dict[str, str]] = None,
        field: Optional[str] = None,
        value: Any = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.field_errors = field_errors or {}
        self.field = field
        self.value = value
