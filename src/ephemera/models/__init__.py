# src/ephemera/models/__init__.py
"""SQLAlchemy models for the Ephemera application."""

from .expiration import ConfigSyncState, ExpirationConfigurationRecord
from .outbound import OutboundMessage
from .thread import ClosedGroup, GroupAdmin, Thread
from .user import LocalUser

__all__ = [
    "ConfigSyncState", "ExpirationConfigurationRecord",
    "OutboundMessage",
    "ClosedGroup", "GroupAdmin", "Thread",
    "LocalUser",
]
