from typing import Any, Dict, List, Optional

from fastapi import status


class BookAPIError(Exception):
    """Base class for errors rendered as JSON responses by the API."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, error: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error = error
        self.details = details

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message, "error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidParameter(BookAPIError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, parameter: str, value: Any, requirement: str):
        super().__init__(
            f"Invalid {parameter} parameter",
            f"{parameter} must be {requirement}",
            {"parameter": parameter, "value": value},
        )
        self.parameter = parameter


class InvalidIdentifier(BookAPIError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, book_id: str):
        super().__init__(
            "Invalid book ID format",
            f"{book_id!r} is not a valid book identifier",
            {"id": book_id},
        )


class NotFound(BookAPIError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, book_id: str):
        super().__init__("Book not found", f"No book found with id {book_id}", {"id": book_id})


class ValidationFailed(BookAPIError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field_errors: Dict[str, str], message: str = "Validation failed"):
        super().__init__(message, "; ".join(field_errors.values()), dict(field_errors))
        self.errors: List[str] = list(field_errors.values())

    def to_body(self) -> Dict[str, Any]:
        return {"message": self.message, "errors": self.errors, "details": self.details}


class InvalidFieldFormat(BookAPIError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            f"Invalid format for field {field}",
            reason,
            {"field": field, "value": value},
        )


class InternalError(BookAPIError):
    def __init__(self, message: str, cause: str):
        super().__init__(message, cause)
