# src/ephemera/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import threads_router

__all__ = ["threads_router"]
