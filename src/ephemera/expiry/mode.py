"""Typed model of how and when messages in a thread disappear.

An :class:`ExpiryMode` is one of four variants:

- ``ExpiryMode.NONE``: messages never disappear.
- :class:`Legacy`: a single timer sent by older clients, with no direction.
- :class:`AfterSend`: the timer starts when the message is sent.
- :class:`AfterRead`: the timer starts when the recipient reads the message.

A zero (or negative) duration is never a valid timed mode: constructing any
variant with one, directly or through :func:`make`, yields ``ExpiryMode.NONE``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR


class ExpirationType(Enum):
    """Tag of an expiry mode, used for option identity and wire negotiation."""

    NONE = "none"
    LEGACY = "legacy"
    AFTER_SEND = "after_send"
    AFTER_READ = "after_read"

    def mode(self, seconds: int) -> ExpiryMode:
        """Build a mode of this type; a non-positive duration yields NONE."""
        return make(self, seconds)


@dataclass(frozen=True)
class ExpiryMode:
    """Base of the expiry mode variants. Use ``ExpiryMode.NONE`` for no expiry."""

    expiry_seconds: int = 0

    NONE: ClassVar[ExpiryMode]

    @property
    def type(self) -> ExpirationType:
        return type_of(self)

    @property
    def duration(self) -> int | None:
        return duration_of(self)

    def __repr__(self) -> str:
        if type(self) is ExpiryMode:
            return "ExpiryMode.NONE"
        return f"{type(self).__name__}({self.expiry_seconds})"


@dataclass(frozen=True, repr=False)
class _TimedMode(ExpiryMode):
    """Variant with a duration; a non-positive duration is ``ExpiryMode.NONE``."""

    def __new__(cls, expiry_seconds: int = 0) -> ExpiryMode:  # type: ignore[misc]
        if expiry_seconds <= 0:
            return ExpiryMode.NONE
        return super().__new__(cls)

    def __reduce__(self) -> tuple[type[ExpiryMode], tuple[int]]:
        return type(self), (self.expiry_seconds,)


@dataclass(frozen=True, repr=False)
class Legacy(_TimedMode):
    """Timer without a send/read direction, as written by older clients."""


@dataclass(frozen=True, repr=False)
class AfterSend(_TimedMode):
    """Delete the message ``expiry_seconds`` after it was sent."""


@dataclass(frozen=True, repr=False)
class AfterRead(_TimedMode):
    """Delete the message ``expiry_seconds`` after it was read."""


ExpiryMode.NONE = ExpiryMode(0)

_VARIANTS: dict[ExpirationType, type[ExpiryMode]] = {
    ExpirationType.LEGACY: Legacy,
    ExpirationType.AFTER_SEND: AfterSend,
    ExpirationType.AFTER_READ: AfterRead,
}
_TYPES: dict[type[ExpiryMode], ExpirationType] = {cls: tag for tag, cls in _VARIANTS.items()}


def type_of(mode: ExpiryMode) -> ExpirationType:
    """Return the expiration type of ``mode``."""
    return _TYPES.get(type(mode), ExpirationType.NONE)


def make(expiration_type: ExpirationType, seconds: int) -> ExpiryMode:
    """Build the mode for ``expiration_type`` lasting ``seconds``."""
    variant = _VARIANTS.get(expiration_type)
    if variant is None or seconds <= 0:
        return ExpiryMode.NONE
    return variant(int(seconds))


def duration_of(mode: ExpiryMode) -> int | None:
    """Return the duration of ``mode`` in seconds, or None when it never expires."""
    if type_of(mode) is ExpirationType.NONE:
        return None
    return mode.expiry_seconds
