"""
FastAPI main application for the BookStore API.
"""

import re
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config import config
from api.exceptions import BookStoreError, BookNotFoundError, BookValidationError
from api.models import (
    Book, BookCreate, BookUpdate, BookPatch,
    BookListResponse, BookUpdatedResponse, BookDeletedResponse,
    ErrorResponse, HealthResponse
)
from api.store import BookStore
from utilities.logger import RequestLogger

# Setup logging
logger = structlog.get_logger(__name__)
request_logger = RequestLogger()

BOOK_ID_PATTERN = re.compile(r"-?[0-9]+")

ENDPOINTS = [
    ("GET", "/books", "List all books"),
    ("GET", "/books/{id}", "Get a specific book"),
    ("POST", "/books", "Create a new book"),
    ("PUT", "/books/{id}", "Update a book completely"),
    ("PATCH", "/books/{id}", "Partially update a book"),
    ("DELETE", "/books/{id}", "Delete a book"),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(
        "Starting BookStore API",
        host=config.host,
        port=config.port,
        total_books=len(app.state.store)
    )
    for method, path, summary in ENDPOINTS:
        logger.info("Endpoint available", method=method, path=path, summary=summary)

    yield

    logger.info("Shutting down BookStore API")


# Create FastAPI application
app = FastAPI(
    title=config.api_title,
    description=config.api_description,
    version=config.api_version,
    lifespan=lifespan
)

app.state.store = BookStore.with_seed_data() if config.seed_books else BookStore()

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=config.cors_allow_credentials,
    allow_methods=config.cors_allow_methods,
    allow_headers=config.cors_allow_headers,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    started = time.perf_counter()
    response = await call_next(request)
    request_logger.log_request(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=(time.perf_counter() - started) * 1000
    )
    return response


def get_store(request: Request) -> BookStore:
    """Return the book store attached to the application."""
    return request.app.state.store


def _parse_book_id(raw_id: str, action: str = "get") -> int:
    """Convert a path ID to an int; anything but plain ASCII digits never exists."""
    if not BOOK_ID_PATTERN.fullmatch(raw_id):
        raise BookNotFoundError(raw_id, action=action)
    return int(raw_id)


def _error_response(status_code: int, error: str, message: Optional[str] = None,
                    details: Optional[list] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            message=message,
            details=details
        ).model_dump(exclude_none=True)
    )


# Exception handlers
@app.exception_handler(BookStoreError)
async def book_store_exception_handler(request: Request, exc: BookStoreError):
    """Handle validation, duplicate and not-found errors raised by the store."""
    logger.info(
        "Request rejected",
        error=exc.error,
        message=exc.message,
        method=request.method,
        path=request.url.path
    )
    if isinstance(exc, BookValidationError):
        return _error_response(exc.status_code, exc.error, details=exc.details)
    return _error_response(exc.status_code, exc.error, message=exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies in the same shape as field validation errors."""
    details = []
    for error in exc.errors():
        location = [part for part in error.get("loc", ()) if isinstance(part, str) and part != "body"]
        if location:
            details.append(f"{'.'.join(location)}: {error['msg']}")
        else:
            details.append(error["msg"])
    logger.info("Malformed request", details=details, path=request.url.path)
    return _error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", details=details)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions; unknown routes and methods become a 404."""
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        url = request.url.path
        if request.url.query:
            url = f"{url}?{request.url.query}"
        return _error_response(
            status.HTTP_404_NOT_FOUND,
            "Not found",
            message=f"Cannot {request.method} {url}"
        )
    return _error_response(exc.status_code, str(exc.detail), message=str(exc.detail))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    request_logger.log_unhandled_error(request.method, request.url.path, exc)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        message="Something went wrong on the server"
    )


# Health check endpoint
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(store: BookStore = Depends(get_store)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=config.api_version,
        total_books=len(store)
    )


# Books endpoints
@app.get("/books", response_model=BookListResponse, tags=["Books"])
async def list_books(
    author: Optional[str] = None,
    title: Optional[str] = None,
    store: BookStore = Depends(get_store)
):
    """
    List books, optionally filtered.

    - **author**: Case-insensitive substring of the author
    - **title**: Case-insensitive substring of the title
    """
    books = store.list_books(author=author, title=title)
    return BookListResponse(count=len(books), books=books)


@app.get("/books/{book_id}", response_model=Book, tags=["Books"])
async def get_book(book_id: str, store: BookStore = Depends(get_store)):
    """Get a single book by ID."""
    return store.get_book(_parse_book_id(book_id))


@app.post("/books", response_model=Book, status_code=status.HTTP_201_CREATED, tags=["Books"])
async def create_book(
    payload: Optional[BookCreate] = None,
    store: BookStore = Depends(get_store)
):
    """
    Create a book.

    Title and author are required, trimmed, and must not match an existing
    book (case-insensitive).
    """
    payload = payload or BookCreate()
    return store.create_book(payload.title, payload.author)


@app.put("/books/{book_id}", response_model=BookUpdatedResponse, tags=["Books"])
async def replace_book(
    book_id: str,
    payload: Optional[BookUpdate] = None,
    store: BookStore = Depends(get_store)
):
    """
    Replace the title and author of a book.

    The ID is checked before the body, so an unknown ID is a 404 even
    when the body is missing.
    """
    payload = payload or BookUpdate()
    book = store.replace_book(_parse_book_id(book_id, "update"), payload.title, payload.author)
    return BookUpdatedResponse(message="Book updated successfully", book=book)


@app.patch("/books/{book_id}", response_model=BookUpdatedResponse, tags=["Books"])
async def update_book(
    book_id: str,
    payload: Optional[BookPatch] = None,
    store: BookStore = Depends(get_store)
):
    """
    Partially update a book.

    Only fields that are present and non-blank are applied.
    """
    payload = payload or BookPatch()
    book = store.update_book(_parse_book_id(book_id, "update"), title=payload.title, author=payload.author)
    return BookUpdatedResponse(message="Book partially updated", book=book)


@app.delete("/books/{book_id}", response_model=BookDeletedResponse, tags=["Books"])
async def delete_book(book_id: str, store: BookStore = Depends(get_store)):
    """Delete a book and return it."""
    book = store.delete_book(_parse_book_id(book_id, "delete"))
    return BookDeletedResponse(message="Book deleted successfully", deleted_book=book)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower()
    )
