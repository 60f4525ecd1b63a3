from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from app.db.session import get_book_store
from app.services import books
from app.services.book_store import BookStore

router = APIRouter()


@router.get("")
def list_books(
    page: Optional[str] = Query(None, description="1-indexed page number"),
    limit: Optional[str] = Query(None, description="Books per page (1-100)"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="'asc' or 'desc'"),
    store: BookStore = Depends(get_book_store),
):
    """List books one page at a time."""
    return books.list_books(store, page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)


@router.post("/add", status_code=status.HTTP_201_CREATED)
def add_book(
    payload: Dict[str, Any] = Body(...),
    store: BookStore = Depends(get_book_store),
):
    """Add a new book. title, author, genre and publishedDate are required."""
    return books.create_book(store, payload)


@router.get("/{book_id}")
def get_book(book_id: str, store: BookStore = Depends(get_book_store)):
    return books.get_book(store, book_id)
