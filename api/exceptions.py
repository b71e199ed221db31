"""
Error kinds raised by the book store.

Each error carries the HTTP status it maps to; the FastAPI exception
handlers in ``api.main`` turn them into JSON responses.
"""

from typing import List, Union


class BookStoreError(Exception):
    """Base class for book store errors."""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BookValidationError(BookStoreError):
    """Raised when a book payload violates one or more field rules."""

    status_code = 400
    error = "Validation failed"

    def __init__(self, details: List[str]):
        super().__init__("; ".join(details))
        self.details = details


class DuplicateBookError(BookStoreError):
    """Raised when a book with the same title and author already exists."""

    status_code = 409
    error = "Duplicate book"

    def __init__(self, title: str, author: str):
        super().__init__("This book already exists in the collection")
        self.title = title
        self.author = author


class BookNotFoundError(BookStoreError):
    """Raised when no book exists with the requested ID."""

    status_code = 404
    error = "Book not found"

    def __init__(self, book_id: Union[int, str], action: str = "get"):
        if action == "get":
            message = f"No book exists with ID {book_id}"
        else:
            message = f"Cannot {action} - no book exists with ID {book_id}"
        super().__init__(message)
        self.book_id = book_id
        self.action = action
