"""Immutable outgoing message records and their expiry helpers."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Protocol, TypeVar

from ephemera.expiry.collaborators import ConfigurationStore
from ephemera.expiry.mode import ExpiryMode
from ephemera.expiry.wire import (
    DataMessage,
    WireContent,
    coerce_send_to_read,
    resolve_expiry,
    with_expiry,
)

DEFAULT_TTL_MS = 14 * 24 * 60 * 60 * 1000


class Message(Protocol):
    """Fields and behaviour shared by every message kind."""

    thread_id: int | None
    sent_timestamp: int | None
    received_timestamp: int | None
    sender: str | None
    recipient: str | None
    expiry_mode: ExpiryMode
    coerce_disappear_after_send_to_read: ClassVar[bool]

    @property
    def ttl_ms(self) -> int: ...

    def is_valid(self) -> bool: ...

    def to_wire_content(self) -> WireContent: ...


@dataclass(frozen=True, kw_only=True)
class _MessageFields:
    thread_id: int | None = None
    sent_timestamp: int | None = None
    received_timestamp: int | None = None
    sender: str | None = None
    recipient: str | None = None
    expiry_mode: ExpiryMode = ExpiryMode.NONE
    specified_ttl_ms: int | None = None

    coerce_disappear_after_send_to_read: ClassVar[bool] = False
    default_ttl_ms: ClassVar[int] = DEFAULT_TTL_MS

    @property
    def ttl_ms(self) -> int:
        if self.specified_ttl_ms is not None:
            return self.specified_ttl_ms
        return self.default_ttl_ms

    def is_valid(self) -> bool:
        if self.sent_timestamp is not None and self.sent_timestamp <= 0:
            return False
        if self.received_timestamp is not None and self.received_timestamp <= 0:
            return False
        return self.sender is not None and self.recipient is not None


@dataclass(frozen=True, kw_only=True)
class VisibleMessage(_MessageFields):
    """A regular chat message."""

    body: str | None = None

    def is_valid(self) -> bool:
        return super().is_valid() and bool(self.body)

    def to_wire_content(self) -> WireContent:
        content = WireContent(kind="VisibleMessage", data_message=DataMessage(body=self.body))
        return with_expiry(content, self.expiry_mode)


@dataclass(frozen=True, kw_only=True)
class ExpirationTimerUpdate(_MessageFields):
    """Control message announcing a new disappearing-messages timer."""

    duration_seconds: int = 0
    sync_target: str | None = None

    def to_wire_content(self) -> WireContent:
        # Older clients only read the data message timer.
        content = WireContent(
            kind="ExpirationTimerUpdate",
            data_message=DataMessage(expire_timer=self.duration_seconds),
        )
        return with_expiry(content, self.expiry_mode)


class DataExtractionKind(Enum):
    SCREENSHOT = "screenshot"
    MEDIA_SAVED = "media_saved"


@dataclass(frozen=True, kw_only=True)
class DataExtractionNotification(_MessageFields):
    """Notice that the recipient captured or saved conversation content."""

    extraction: DataExtractionKind = DataExtractionKind.SCREENSHOT

    coerce_disappear_after_send_to_read: ClassVar[bool] = True

    def to_wire_content(self) -> WireContent:
        content = WireContent(kind=f"DataExtractionNotification:{self.extraction.value}")
        return with_expiry(content, self.expiry_mode)


M = TypeVar("M", bound=_MessageFields)


async def apply_expiry(message: M, store: ConfigurationStore) -> M:
    """Return ``message`` carrying the expiry mode configured for its thread."""
    config = None
    if message.thread_id is not None:
        config = await store.get_configuration(message.thread_id)
    if config is None:
        return dataclasses.replace(message, expiry_mode=ExpiryMode.NONE)
    mode = coerce_send_to_read(config.expiry_mode, message.coerce_disappear_after_send_to_read)
    return dataclasses.replace(message, expiry_mode=mode)


def copy_expiration(message: M, content: WireContent) -> M:
    """Return ``message`` with the expiry mode received in ``content``.

    Content without any timer leaves the message untouched.
    """
    if content.expiration_timer is None and (
        content.data_message is None or content.data_message.expire_timer is None
    ):
        return message
    return dataclasses.replace(message, expiry_mode=resolve_expiry(content))
