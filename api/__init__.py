"""
FastAPI REST API for the BookStore service.

This package provides:
- Book listing with author/title filtering
- Creating, replacing, partially updating and deleting books
- An in-memory book store injected into each route
"""
