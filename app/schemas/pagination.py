from typing import Literal, Optional

from pydantic import BaseModel


class Pagination(BaseModel):
    currentPage: int
    totalPages: int
    totalBooks: int
    booksPerPage: int
    hasNextPage: bool
    hasPrevPage: bool
    nextPage: Optional[int] = None
    prevPage: Optional[int] = None


class Sorting(BaseModel):
    sortBy: str
    sortOrder: Literal["asc", "desc"]
