import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from neo4j import Driver
from neo4j.exceptions import DriverError, Neo4jError

from app.db.errors import ErrorKind, PersistenceError
from app.schemas.book import validate_candidate

logger = logging.getLogger(__name__)

BOOK_ID_PATTERN = re.compile(r"[0-9a-fA-F]{24}")

_FIND_QUERY = """
MATCH (b:Book)
WITH b
ORDER BY b[$sort_by] {direction}, b.id {direction}
SKIP $skip
LIMIT $limit
RETURN b {{.*}} AS book
"""

_COUNT_QUERY = "MATCH (b:Book) RETURN count(b) AS total"

_FIND_BY_ID_QUERY = "MATCH (b:Book {id: $id}) RETURN b {.*} AS book"

# The database assigns the identifier and the creation timestamp
_INSERT_QUERY = """
CREATE (b:Book {
    id: substring(replace(randomUUID(), '-', ''), 0, 24),
    title: $title,
    author: $author,
    genre: $genre,
    publishedDate: $publishedDate,
    createdAt: datetime()
})
RETURN b {.*} AS book
"""


def is_valid_id(book_id: str) -> bool:
    return bool(BOOK_ID_PATTERN.fullmatch(book_id or ""))


def _to_document(node: Mapping[str, Any]) -> Dict[str, Any]:
    # neo4j.time values -> datetime.date / datetime.datetime
    return {
        key: value.to_native() if hasattr(value, "to_native") else value
        for key, value in node.items()
    }


class BookStore:
    """Access to the ``:Book`` nodes of the graph database.

    Every failure is raised as a ``PersistenceError`` tagged with an
    ``ErrorKind``; driver exceptions never escape this class.
    """

    def __init__(self, driver: Optional[Driver], database: Optional[str] = None):
        self.driver = driver
        self.database = database

    def _run(self, query: str, **params: Any) -> List[Dict[str, Any]]:
        if self.driver is None:
            raise PersistenceError(ErrorKind.OTHER, "Database connection is not available")
        try:
            with self.driver.session(database=self.database) as session:
                result = session.run(query, params)
                return [dict(record) for record in result]
        except (Neo4jError, DriverError) as e:
            logger.exception("Neo4j query failed: %s", e)
            raise PersistenceError(ErrorKind.OTHER, str(e) or type(e).__name__) from e
        except (ValueError, OverflowError) as e:
            # Parameters the driver cannot pack, e.g. integers beyond 64 bits
            logger.error("Could not send query parameters: %s", e)
            raise PersistenceError(ErrorKind.OTHER, str(e) or type(e).__name__) from e

    def find(self, sort_by: str, descending: bool, skip: int, limit: int) -> List[Dict[str, Any]]:
        """Return one page of books ordered by the ``sort_by`` property."""
        direction = "DESC" if descending else "ASC"
        records = self._run(
            _FIND_QUERY.format(direction=direction),
            sort_by=sort_by,
            skip=skip,
            limit=limit,
        )
        return [_to_document(record["book"]) for record in records]

    def count(self) -> int:
        records = self._run(_COUNT_QUERY)
        return records[0]["total"] if records else 0

    def find_by_id(self, book_id: str) -> Optional[Dict[str, Any]]:
        records = self._run(_FIND_BY_ID_QUERY, id=book_id)
        if not records:
            return None
        return _to_document(records[0]["book"])

    def insert_one(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate and store a new book, returning the stored record."""
        candidate = validate_candidate(payload)
        records = self._run(_INSERT_QUERY, **candidate.model_dump())
        if not records:
            raise PersistenceError(ErrorKind.OTHER, "Book was not created")
        return _to_document(records[0]["book"])
