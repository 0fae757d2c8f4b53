# src/ephemera/services/__init__.py
"""Database and network implementations of the expiry collaborators."""

from .config_sync import ConfigSyncService
from .configuration_store import SqlConfigurationStore
from .directory import SqlGroupLookup, SqlRecipientLookup, StaticIdentity
from .message_sender import OutboxMessageSender

__all__ = [
    "ConfigSyncService",
    "SqlConfigurationStore",
    "SqlGroupLookup",
    "SqlRecipientLookup",
    "StaticIdentity",
    "OutboxMessageSender",
]
