from datetime import date, datetime
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.db.errors import ErrorKind, PersistenceError

BOOK_FIELDS = ("title", "author", "genre", "publishedDate")


class BookCreate(BaseModel):
    """Candidate record submitted for storage."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    genre: str = Field(..., min_length=1)
    publishedDate: date


class Book(BaseModel):
    id: str
    title: str
    author: str
    genre: str
    publishedDate: date
    createdAt: datetime


def _is_required_violation(error: Dict[str, Any]) -> bool:
    if error["type"] in ("missing", "string_too_short"):
        return True
    value = error.get("input")
    return value is None or (isinstance(value, str) and not value.strip())


def validate_candidate(payload: Mapping[str, Any]) -> BookCreate:
    """Validate a candidate book, reporting failures as persistence errors.

    When any field is absent, null or blank, a single ``VALIDATION`` error
    carries one message per violated field, malformed values included.
    When all fields are present but one cannot be coerced to its type, a
    ``CAST`` error names the first of them.
    """
    try:
        return BookCreate.model_validate(dict(payload))
    except ValidationError as exc:
        errors = exc.errors()

    field_errors = {}
    missing = False
    for error in errors:
        field = str(error["loc"][0]) if error["loc"] else "book"
        if _is_required_violation(error):
            missing = True
            field_errors.setdefault(field, f"{field} is required")
        else:
            field_errors.setdefault(field, f"{field} has an invalid value {error.get('input')!r}")
    if missing:
        raise PersistenceError(
            ErrorKind.VALIDATION,
            "Book validation failed: " + ", ".join(field_errors),
            field_errors=field_errors,
        )

    first = errors[0]
    field = str(first["loc"][0]) if first["loc"] else "book"
    value = first.get("input")
    raise PersistenceError(
        ErrorKind.CAST,
        f"Cast failed for value {value!r} at path {field!r}: {first['msg']}",
        field=field,
        value=value,
    )
