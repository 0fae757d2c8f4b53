# src/ephemera/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .threads import router as threads_router

__all__ = ["threads_router"]
