"""
Unit tests for Pydantic API models.
Tests validation, aliases and serialization.
"""

import pytest
from pydantic import ValidationError

from api.models import (
    Book, BookCreate, BookPatch, BookDeletedResponse, BookListResponse, ErrorResponse
)


class TestBook:
    """Test cases for the Book model."""

    def test_valid_book(self):
        """Test creating a valid book."""
        book = Book(id=1, title="Dune", author="Frank Herbert")

        assert book.model_dump() == {"id": 1, "title": "Dune", "author": "Frank Herbert"}

    def test_missing_field(self):
        """Test that all fields are required on a stored book."""
        with pytest.raises(ValidationError):
            Book(id=1, title="Dune")


class TestRequestModels:
    """Test cases for request bodies."""

    def test_create_fields_are_optional(self):
        """Test that missing fields parse as None for the store to report."""
        payload = BookCreate()

        assert payload.title is None
        assert payload.author is None

    def test_create_rejects_non_string(self):
        """Test that a number is not accepted as a title."""
        with pytest.raises(ValidationError):
            BookCreate(title=1984, author="George Orwell")

    def test_patch_distinguishes_absent_and_empty(self):
        """Test that an empty string is kept distinct from an absent field."""
        payload = BookPatch(title="")

        assert payload.title == ""
        assert payload.author is None

    def test_extra_fields_ignored(self):
        """Test that unknown keys in the body are dropped."""
        payload = BookCreate(title="Dune", author="Frank Herbert", year=1965)

        assert not hasattr(payload, "year")


class TestResponseModels:
    """Test cases for response envelopes."""

    def test_deleted_book_alias(self):
        """Test that the deleted book serializes under its camelCase key."""
        book = Book(id=3, title="1984", author="George Orwell")
        response = BookDeletedResponse(message="Book deleted successfully", deleted_book=book)

        data = response.model_dump(by_alias=True)
        assert "deletedBook" in data
        assert data["deletedBook"]["id"] == 3

    def test_list_response(self):
        """Test the list envelope."""
        response = BookListResponse(count=0, books=[])

        assert response.model_dump() == {"count": 0, "books": []}

    def test_error_response_drops_unset_fields(self):
        """Test that unused error fields are omitted."""
        error = ErrorResponse(error="Book not found", message="No book exists with ID 9")

        assert error.model_dump(exclude_none=True) == {
            "error": "Book not found",
            "message": "No book exists with ID 9"
        }
