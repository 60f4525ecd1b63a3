"""Request handling for the books resource.

Each function takes the raw request values and a ``BookStore``, talks to
the store and returns the JSON-ready envelope. Failures are raised as
``BookAPIError`` subclasses which the application renders as JSON.
"""

import logging
import math
import re
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from app.core.errors import (
    InternalError,
    InvalidFieldFormat,
    InvalidIdentifier,
    InvalidParameter,
    NotFound,
    ValidationFailed,
)
from app.db.errors import ErrorKind, PersistenceError
from app.schemas.book import BOOK_FIELDS, Book
from app.schemas.pagination import Pagination, Sorting
from app.services.book_store import BookStore, is_valid_id

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Largest offset the database accepts (signed 64-bit integer)
MAX_SKIP = 2 ** 63 - 1
DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"

_INTEGER = re.compile(r"\s*[+-]?\d+\s*")


def parse_int_param(
    name: str,
    raw: Optional[str],
    default: int,
    minimum: int = 1,
    maximum: Optional[int] = None,
) -> int:
    """Parse an integer query parameter.

    ``None`` means the parameter was absent and yields ``default``. Any
    other value must be an integer within ``[minimum, maximum]``.
    """
    if raw is None:
        return default
    requirement = (
        f"an integer between {minimum} and {maximum}"
        if maximum is not None
        else f"an integer greater than or equal to {minimum}"
    )
    if not _INTEGER.fullmatch(raw):
        raise InvalidParameter(name, raw, requirement)
    value = int(raw)
    if value < minimum or (maximum is not None and value > maximum):
        raise InvalidParameter(name, raw, requirement)
    return value


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    total_pages = math.ceil(total / limit)
    has_next = page < total_pages
    has_prev = page > 1
    return Pagination(
        currentPage=page,
        totalPages=total_pages,
        totalBooks=total,
        booksPerPage=limit,
        hasNextPage=has_next,
        hasPrevPage=has_prev,
        nextPage=page + 1 if has_next else None,
        prevPage=page - 1 if has_prev else None,
    )


def _serialize(document: Mapping[str, Any]) -> Dict[str, Any]:
    try:
        return Book.model_validate(dict(document)).model_dump(mode="json")
    except ValidationError as e:
        logger.error("Stored book %s is malformed: %s", document.get("id"), e)
        raise InternalError(
            "Error reading book",
            f"Stored book record is malformed: {e.error_count()} invalid field(s)",
        ) from e


def list_books(
    store: BookStore,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> Dict[str, Any]:
    page_size = parse_int_param("limit", limit, DEFAULT_LIMIT, maximum=MAX_LIMIT)
    page_number = parse_int_param("page", page, DEFAULT_PAGE, maximum=MAX_SKIP // page_size + 1)
    sort_by = sort_by or DEFAULT_SORT_BY
    effective_order = "asc" if sort_order == "asc" else DEFAULT_SORT_ORDER

    try:
        documents = store.find(
            sort_by=sort_by,
            descending=effective_order == "desc",
            skip=(page_number - 1) * page_size,
            limit=page_size,
        )
        total = store.count()
    except PersistenceError as e:
        raise InternalError("Error retrieving books", e.message) from e

    return {
        "success": True,
        "data": {
            "books": [_serialize(doc) for doc in documents],
            "pagination": build_pagination(page_number, page_size, total).model_dump(),
            "sorting": Sorting(sortBy=sort_by, sortOrder=effective_order).model_dump(),
        },
    }


def get_book(store: BookStore, book_id: str) -> Dict[str, Any]:
    if not is_valid_id(book_id):
        raise InvalidIdentifier(book_id)

    try:
        document = store.find_by_id(book_id)
    except PersistenceError as e:
        raise InternalError("Error retrieving book", e.message) from e

    if document is None:
        raise NotFound(book_id)
    return {"success": True, "data": {"book": _serialize(document)}}


def create_book(store: BookStore, payload: Mapping[str, Any]) -> Dict[str, Any]:
    # Only the known fields are forwarded; absent ones stay absent
    candidate = {field: payload[field] for field in BOOK_FIELDS if field in payload}

    try:
        document = store.insert_one(candidate)
    except PersistenceError as e:
        if e.kind is ErrorKind.VALIDATION:
            logger.info("Rejected book: %s", e.message)
            raise ValidationFailed(e.field_errors) from e
        if e.kind is ErrorKind.CAST:
            logger.info("Rejected book: %s", e.message)
            raise InvalidFieldFormat(e.field, e.value, e.message) from e
        raise InternalError("Error adding book", e.message) from e

    book = _serialize(document)
    logger.info("Book %s added: %r", book["id"], book["title"])
    return {"message": "Book added successfully!", "book": book}
