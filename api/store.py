"""
In-memory book store for the FastAPI application.

The store owns the ordered book collection and the ID counter. It is
created once per application and handed to each route through a FastAPI
dependency, so tests can build isolated stores.

Lookups and the duplicate check scan the whole collection. That is O(n)
per operation, which is fine for the small collections this service holds.
"""

from typing import Dict, Iterable, List, Optional, Union

import structlog

from api.exceptions import BookNotFoundError, BookValidationError, DuplicateBookError
from api.models import Book

logger = structlog.get_logger(__name__)

SEED_BOOKS: List[Dict[str, Union[int, str]]] = [
    {"id": 1, "title": "The Great Gatsby", "author": "F. Scott Fitzgerald"},
    {"id": 2, "title": "To Kill a Mockingbird", "author": "Harper Lee"},
    {"id": 3, "title": "1984", "author": "George Orwell"},
]


def _clean(value: Optional[str]) -> str:
    """Return the trimmed value, or an empty string for ``None``."""
    return (value or "").strip()


def validate_book_fields(title: Optional[str], author: Optional[str]) -> None:
    """
    Check that both fields are present and non-empty after trimming.

    Raises:
        BookValidationError: listing every violated field, title first
    """
    errors = []
    if not _clean(title):
        errors.append("Title is required and cannot be empty")
    if not _clean(author):
        errors.append("Author is required and cannot be empty")
    if errors:
        raise BookValidationError(errors)


class BookStore:
    """Ordered in-memory collection of books."""

    def __init__(self, books: Optional[Iterable[Dict]] = None):
        self._books: List[Book] = [Book(**book) for book in books or []]
        self._next_id = max((book.id for book in self._books), default=0) + 1

    @classmethod
    def with_seed_data(cls) -> "BookStore":
        """Create a store holding the three seed books."""
        return cls(SEED_BOOKS)

    @property
    def next_id(self) -> int:
        """ID the next created book will receive."""
        return self._next_id

    def __len__(self) -> int:
        return len(self._books)

    def _find_index(self, book_id: int) -> int:
        for index, book in enumerate(self._books):
            if book.id == book_id:
                return index
        return -1

    def list_books(
        self,
        author: Optional[str] = None,
        title: Optional[str] = None
    ) -> List[Book]:
        """
        Return books matching the optional filters.

        Args:
            author: Case-insensitive substring the author must contain
            title: Case-insensitive substring the title must contain

        Returns:
            Matching books in collection order
        """
        books = list(self._books)
        if author:
            needle = author.lower()
            books = [book for book in books if needle in book.author.lower()]
        if title:
            needle = title.lower()
            books = [book for book in books if needle in book.title.lower()]
        return books

    def get_book(self, book_id: int) -> Book:
        """Return the book with the given ID."""
        index = self._find_index(book_id)
        if index == -1:
            raise BookNotFoundError(book_id)
        return self._books[index]

    def create_book(self, title: Optional[str], author: Optional[str]) -> Book:
        """
        Validate, de-duplicate and append a new book.

        Raises:
            BookValidationError: if title or author is missing or blank
            DuplicateBookError: if the same title and author already exist
        """
        validate_book_fields(title, author)
        title, author = _clean(title), _clean(author)

        for book in self._books:
            if book.title.lower() == title.lower() and book.author.lower() == author.lower():
                raise DuplicateBookError(title, author)

        book = Book(id=self._next_id, title=title, author=author)
        self._next_id += 1
        self._books.append(book)
        logger.info("Book created", book_id=book.id, title=book.title, author=book.author)
        return book

    def replace_book(
        self,
        book_id: int,
        title: Optional[str],
        author: Optional[str]
    ) -> Book:
        """
        Overwrite both fields of an existing book.

        The ID check runs before validation. No duplicate check is made.
        """
        index = self._find_index(book_id)
        if index == -1:
            raise BookNotFoundError(book_id, action="update")

        validate_book_fields(title, author)
        book = Book(id=book_id, title=_clean(title), author=_clean(author))
        self._books[index] = book
        logger.info("Book replaced", book_id=book_id)
        return book

    def update_book(
        self,
        book_id: int,
        title: Optional[str] = None,
        author: Optional[str] = None
    ) -> Book:
        """
        Apply a partial update.

        A field is applied only when it is given and non-empty after
        trimming. Missing and blank fields leave the stored value unchanged.
        """
        index = self._find_index(book_id)
        if index == -1:
            raise BookNotFoundError(book_id, action="update")

        book = self._books[index]
        changes = {}
        for field, value in (("title", title), ("author", author)):
            if value is None:
                continue
            if not value.strip():
                logger.debug("Ignoring blank field in partial update", book_id=book_id, field=field)
                continue
            changes[field] = value.strip()

        if changes:
            book = book.model_copy(update=changes)
            self._books[index] = book
            logger.info("Book updated", book_id=book_id, fields=sorted(changes))
        return book

    def delete_book(self, book_id: int) -> Book:
        """Remove a book, keeping the order of the rest, and return it."""
        index = self._find_index(book_id)
        if index == -1:
            raise BookNotFoundError(book_id, action="delete")

        book = self._books.pop(index)
        logger.info("Book deleted", book_id=book_id)
        return book
