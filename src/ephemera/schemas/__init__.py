"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .expiration import (
    ExpirationCommitResponse,
    ExpirationSettingsResponse,
    ExpiryEdit,
    ExpiryEditRequest,
    ExpiryModeSchema,
)

__all__ = [
    "ExpirationCommitResponse", "ExpirationSettingsResponse",
    "ExpiryEdit", "ExpiryEditRequest", "ExpiryModeSchema",
]
