"""Contracts of the collaborators the expiration settings depend on.

Every method is a coroutine: implementations may hit a database or the
network. The engine never assumes a ``set_configuration`` is visible to a
``get_configuration`` issued elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from ephemera.expiry.mode import ExpiryMode

if TYPE_CHECKING:
    from ephemera.expiry.messages import Message


@dataclass(frozen=True)
class ExpirationConfiguration:
    """Persisted expiry mode of a thread and when it last changed."""

    thread_id: int
    expiry_mode: ExpiryMode
    updated_at_ms: int


@dataclass(frozen=True)
class Recipient:
    """Recipient of a thread."""

    address: str
    is_closed_group: bool = False


@dataclass(frozen=True)
class Group:
    """Closed group metadata relevant to expiry settings."""

    address: str
    admins: frozenset[str] = field(default_factory=frozenset)


class ConfigurationStore(Protocol):
    async def get_configuration(self, thread_id: int) -> ExpirationConfiguration | None: ...

    async def set_configuration(self, config: ExpirationConfiguration) -> None:
        """Persist ``config``; raises StorageError on failure."""
        ...


class RecipientLookup(Protocol):
    async def get_recipient(self, thread_id: int) -> Recipient | None: ...


class GroupLookup(Protocol):
    async def get_group(self, address: str) -> Group | None: ...


class LocalIdentity(Protocol):
    async def get_local_address(self) -> str: ...


class MessageSender(Protocol):
    async def send(self, message: Message, to: str) -> None:
        """Hand ``message`` over for delivery; raises MessageSendError on failure."""
        ...


class ConfigSync(Protocol):
    async def force_sync_if_needed(self) -> bool: ...
