from app.core.config import settings
from app.db.neo4j import get_driver
from app.services.book_store import BookStore


def get_book_store() -> BookStore:
    """Provide a BookStore over the shared driver for dependency injection."""
    return BookStore(get_driver(), database=settings.neo4j_database)
