"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class Book(BaseModel):
    """A single book record in the collection."""
    id: int = Field(..., description="Unique book identifier")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": 3,
                "title": "1984",
                "author": "George Orwell"
            }
        }
    }


class BookCreate(BaseModel):
    """
    Request body for creating a book.

    Both fields are optional at the schema level so that the store can
    report every missing or blank field in a single validation error.
    """
    title: Optional[str] = Field(None, description="Book title")
    author: Optional[str] = Field(None, description="Book author")

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Brave New World",
                "author": "Aldous Huxley"
            }
        }
    }


class BookUpdate(BookCreate):
    """Request body for replacing a book; same rules as creation."""


class BookPatch(BaseModel):
    """
    Request body for a partial update.

    ``None`` means the field was not sent. Empty strings are accepted here
    and ignored by the store.
    """
    title: Optional[str] = Field(None, description="New title, if changing")
    author: Optional[str] = Field(None, description="New author, if changing")


class BookListResponse(BaseModel):
    """Response model for the book list."""
    count: int = Field(..., description="Number of books returned")
    books: List[Book] = Field(..., description="List of books")


class BookUpdatedResponse(BaseModel):
    """Response model for full and partial updates."""
    message: str = Field(..., description="Outcome message")
    book: Book = Field(..., description="Updated book")


class BookDeletedResponse(BaseModel):
    """Response model for a deleted book."""
    message: str = Field(..., description="Outcome message")
    deleted_book: Book = Field(..., alias="deletedBook", description="Removed book")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error summary")
    message: Optional[str] = Field(None, description="Human-readable error message")
    details: Optional[List[str]] = Field(None, description="Individual validation failures")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    total_books: int = Field(..., description="Number of books in the collection")
