"""Conversion between the wire expiration fields and :class:`ExpiryMode`.

On the wire a message carries an integer timer (seconds) and an optional
expiration type. Older clients only ever send the timer, so an absent or
``UNKNOWN`` type with a positive timer is read as a :class:`Legacy` timer.
There is no wire tag for legacy: it is written back as ``UNKNOWN``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from ephemera.expiry.mode import AfterRead, AfterSend, ExpiryMode, Legacy


class WireExpirationType(IntEnum):
    """Expiration type enumeration of the protocol content message."""

    UNKNOWN = 0
    DELETE_AFTER_SEND = 1
    DELETE_AFTER_READ = 2


def from_wire(timer: int | None, expiration_type: WireExpirationType | int | None) -> ExpiryMode:
    """Interpret a wire timer and type as an expiry mode."""
    if timer is None or timer <= 0:
        return ExpiryMode.NONE
    if expiration_type == WireExpirationType.DELETE_AFTER_SEND:
        return AfterSend(timer)
    if expiration_type == WireExpirationType.DELETE_AFTER_READ:
        return AfterRead(timer)
    return Legacy(timer)


def to_wire(mode: ExpiryMode) -> tuple[int, WireExpirationType]:
    """Return the ``(timer, type)`` wire pair for ``mode``."""
    if isinstance(mode, AfterSend):
        return mode.expiry_seconds, WireExpirationType.DELETE_AFTER_SEND
    if isinstance(mode, AfterRead):
        return mode.expiry_seconds, WireExpirationType.DELETE_AFTER_READ
    return mode.expiry_seconds, WireExpirationType.UNKNOWN


def coerce_send_to_read(mode: ExpiryMode, should_coerce: bool) -> ExpiryMode:
    """Turn an after-send mode into after-read for kinds that must be read-triggered."""
    if should_coerce and isinstance(mode, AfterSend):
        return AfterRead(mode.expiry_seconds)
    return mode


@dataclass(frozen=True)
class DataMessage:
    """Legacy data message section; only its per-message timer matters here."""

    expire_timer: int | None = None
    body: str | None = None


@dataclass(frozen=True)
class WireContent:
    """Expiration-relevant view of a protocol content message."""

    expiration_timer: int | None = None
    expiration_type: WireExpirationType | None = None
    data_message: DataMessage | None = None
    kind: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""
        payload: dict[str, Any] = {"kind": self.kind}
        if self.expiration_timer is not None:
            payload["expiration_timer"] = self.expiration_timer
        if self.expiration_type is not None:
            payload["expiration_type"] = self.expiration_type.name
        if self.data_message is not None:
            payload["data_message"] = {
                "expire_timer": self.data_message.expire_timer,
                "body": self.data_message.body,
            }
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> WireContent:
        """Build content from :meth:`to_dict` output; unknown type names read as UNKNOWN."""
        raw_type = payload.get("expiration_type")
        expiration_type: WireExpirationType | None = None
        if raw_type is not None:
            expiration_type = WireExpirationType.__members__.get(
                str(raw_type), WireExpirationType.UNKNOWN
            )
        data = payload.get("data_message")
        data_message = None
        if isinstance(data, Mapping):
            data_message = DataMessage(
                expire_timer=data.get("expire_timer"),
                body=data.get("body"),
            )
        return cls(
            expiration_timer=payload.get("expiration_timer"),
            expiration_type=expiration_type,
            data_message=data_message,
            kind=payload.get("kind"),
        )


def content_duration(content: WireContent) -> int | None:
    """Pick the timer from the structured field, falling back to the data message."""
    if content.expiration_timer is not None:
        return content.expiration_timer
    if content.data_message is not None:
        return content.data_message.expire_timer
    return None


def resolve_expiry(content: WireContent) -> ExpiryMode:
    """Resolve the expiry mode carried by ``content``."""
    return from_wire(content_duration(content), content.expiration_type)


def with_expiry(content: WireContent, mode: ExpiryMode) -> WireContent:
    """Return ``content`` with its expiration fields set from ``mode``."""
    timer, expiration_type = to_wire(mode)
    return WireContent(
        expiration_timer=timer,
        expiration_type=expiration_type,
        data_message=content.data_message,
        kind=content.kind,
    )
