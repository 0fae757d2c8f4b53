"""Disappearing-messages engine: expiry modes, wire coercion and settings."""

from .collaborators import ExpirationConfiguration, Group, Recipient
from .errors import (
    CommitInProgressError,
    ConfigSyncError,
    ExpiryError,
    MessageSendError,
    NotInitializedError,
    OptionDisabledError,
    OptionNotOfferedError,
    StorageError,
)
from .mode import AfterRead, AfterSend, ExpirationType, ExpiryMode, Legacy, duration_of, make, type_of
from .state import Event, ExpirationSettings, SettingsState
from .wire import WireContent, WireExpirationType, coerce_send_to_read, from_wire, to_wire

__all__ = [
    "ExpirationConfiguration", "Group", "Recipient",
    "CommitInProgressError", "ConfigSyncError", "ExpiryError",
    "MessageSendError", "NotInitializedError", "OptionDisabledError",
    "OptionNotOfferedError", "StorageError",
    "AfterRead", "AfterSend", "ExpirationType", "ExpiryMode", "Legacy",
    "duration_of", "make", "type_of",
    "Event", "ExpirationSettings", "SettingsState",
    "WireContent", "WireExpirationType", "coerce_send_to_read", "from_wire", "to_wire",
]
