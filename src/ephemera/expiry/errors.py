"""Exceptions raised by the disappearing-messages engine."""


class ExpiryError(RuntimeError):
    """Base exception for expiration settings failures."""


class NotInitializedError(ExpiryError):
    """Raised when an edit is attempted before the settings finished loading."""


class CommitInProgressError(ExpiryError):
    """Raised when an edit or commit overlaps an in-flight commit."""


class StorageError(ExpiryError):
    """Raised by a configuration store that failed to persist a configuration."""


class MessageSendError(ExpiryError):
    """Raised by a message sender that could not accept an outgoing message."""


class ConfigSyncError(ExpiryError):
    """Raised when pushing configuration changes to the sync endpoint fails."""


class OptionNotOfferedError(ExpiryError):
    """Raised when an edit does not match any option the settings screen offers."""


class OptionDisabledError(ExpiryError):
    """Raised when an edit matches an option the viewer is not allowed to pick."""
