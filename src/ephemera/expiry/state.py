"""State machine behind a thread's disappearing-messages settings.

An :class:`ExpirationSettings` instance belongs to a single caller. It loads
the thread's configuration once (:meth:`ExpirationSettings.initialize`),
accepts edits to a working copy, and writes the result back on
:meth:`ExpirationSettings.commit`, announcing it to the thread with an
``ExpirationTimerUpdate``.

Edits are rejected with :class:`NotInitializedError` until loading finished
and with :class:`CommitInProgressError` while a commit is running.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum

from ephemera.expiry.collaborators import (
    ConfigSync,
    ConfigurationStore,
    ExpirationConfiguration,
    GroupLookup,
    LocalIdentity,
    MessageSender,
    RecipientLookup,
)
from ephemera.expiry.errors import (
    CommitInProgressError,
    ConfigSyncError,
    MessageSendError,
    NotInitializedError,
    OptionDisabledError,
    OptionNotOfferedError,
    StorageError,
)
from ephemera.expiry.messages import ExpirationTimerUpdate
from ephemera.expiry.mode import (
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    AfterRead,
    AfterSend,
    ExpirationType,
    ExpiryMode,
    Legacy,
)
from ephemera.expiry.options import OptionAction, UiState, build_ui_state, find_option

logger = logging.getLogger(__name__)

AFTER_READ_DEFAULT_SECONDS = 12 * SECONDS_PER_HOUR
DEFAULT_SECONDS = SECONDS_PER_DAY


class Event(Enum):
    """Outcome of a commit."""

    SUCCESS = "success"
    FAIL = "fail"


class Phase(Enum):
    UNINITIALIZED = "uninitialized"
    LOADED = "loaded"
    COMMITTING = "committing"


@dataclass(frozen=True)
class SettingsState:
    """Working copy of a thread's expiry settings plus the viewer's role."""

    is_group: bool = False
    is_self_admin: bool = True
    is_note_to_self: bool = False
    address: str | None = None
    expiry_mode: ExpiryMode | None = None
    is_new_config_enabled: bool = True
    persisted_mode: ExpiryMode | None = None

    @property
    def duration(self) -> int | None:
        return self.expiry_mode.duration if self.expiry_mode is not None else None

    @property
    def expiry_type(self) -> ExpirationType | None:
        return self.expiry_mode.type if self.expiry_mode is not None else None

    @property
    def is_time_options_enabled(self) -> bool:
        return self.is_note_to_self or (
            self.is_self_admin
            and (self.is_new_config_enabled or self.expiry_type == ExpirationType.LEGACY)
        )

    @property
    def subtitle(self) -> str:
        if self.is_group or self.is_note_to_self:
            return "This setting applies to everyone in this conversation."
        return "This setting applies to messages you send in this conversation."


def default_mode(expiration_type: ExpirationType, persisted_mode: ExpiryMode | None) -> ExpiryMode:
    """Mode selected when switching to ``expiration_type``.

    The persisted mode wins when it has the same type, so the last saved
    duration comes back. Otherwise after-read starts at 12 hours and the other
    timed types at 1 day.
    """
    if persisted_mode is not None and persisted_mode.type == expiration_type:
        return persisted_mode
    if expiration_type == ExpirationType.AFTER_READ:
        return expiration_type.mode(AFTER_READ_DEFAULT_SECONDS)
    return expiration_type.mode(DEFAULT_SECONDS)


def normalize_for_commit(mode: ExpiryMode | None, is_group: bool) -> ExpiryMode:
    """Resolve a legacy timer to a directional mode for the thread's audience."""
    if mode is None:
        return ExpiryMode.NONE
    if isinstance(mode, Legacy):
        return AfterSend(mode.expiry_seconds) if is_group else AfterRead(mode.expiry_seconds)
    return mode


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class ExpirationSettings:
    """Loads, edits and commits the expiry settings of one thread."""

    def __init__(
        self,
        thread_id: int,
        *,
        store: ConfigurationStore,
        recipients: RecipientLookup,
        groups: GroupLookup,
        identity: LocalIdentity,
        sender: MessageSender,
        config_sync: ConfigSync,
        is_new_config_enabled: bool,
        clock: Callable[[], int] = _wall_clock_ms,
    ) -> None:
        self.thread_id = thread_id
        self._store = store
        self._recipients = recipients
        self._groups = groups
        self._identity = identity
        self._sender = sender
        self._config_sync = config_sync
        self._clock = clock
        self._state = SettingsState(is_new_config_enabled=is_new_config_enabled)
        self._phase = Phase.UNINITIALIZED
        self._local_address: str | None = None
        self.configuration: ExpirationConfiguration | None = None
        self.events: asyncio.Queue[Event] = asyncio.Queue()

    @property
    def state(self) -> SettingsState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._phase

    def ui_state(self, debug: bool = False) -> UiState:
        return build_ui_state(self._state, debug)

    async def initialize(self) -> SettingsState:
        """Load the configuration, recipient and role for the thread."""
        if self._phase is Phase.COMMITTING:
            raise CommitInProgressError("cannot reload while a commit is in flight")

        config = await self._store.get_configuration(self.thread_id)
        self.configuration = config
        mode = config.expiry_mode if config is not None else ExpiryMode.NONE

        recipient = await self._recipients.get_recipient(self.thread_id)
        group = None
        if recipient is not None and recipient.is_closed_group:
            group = await self._groups.get_group(recipient.address)
        local_address = await self._identity.get_local_address()
        self._local_address = local_address

        self._state = replace(
            self._state,
            address=recipient.address if recipient is not None else None,
            is_group=group is not None,
            is_note_to_self=recipient is not None and recipient.address == local_address,
            is_self_admin=group is None or local_address in group.admins,
            expiry_mode=mode,
            persisted_mode=mode,
        )
        self._phase = Phase.LOADED
        logger.debug("Loaded expiry settings for thread %s: %r", self.thread_id, mode)
        return self._state

    def _ensure_editable(self) -> None:
        if self._phase is Phase.UNINITIALIZED:
            raise NotInitializedError(f"settings for thread {self.thread_id} are not loaded yet")
        if self._phase is Phase.COMMITTING:
            raise CommitInProgressError(f"a commit for thread {self.thread_id} is in flight")

    def set_type(self, expiration_type: ExpirationType) -> None:
        self._ensure_editable()
        if self._state.expiry_type == expiration_type:
            return
        self._state = replace(
            self._state,
            expiry_mode=default_mode(expiration_type, self._state.persisted_mode),
        )

    def set_time(self, seconds: int) -> None:
        self._ensure_editable()
        current = self._state.expiry_type
        if current is None:
            return
        self._state = replace(self._state, expiry_mode=current.mode(seconds))

    def set_mode(self, mode: ExpiryMode) -> None:
        self._ensure_editable()
        self._state = replace(self._state, expiry_mode=mode)

    def apply(self, action: OptionAction) -> None:
        """Perform the edit attached to a projected option."""
        if action.name == "set_type":
            self.set_type(action.expiration_type or ExpirationType.NONE)
        elif action.name == "set_time":
            self.set_time(action.seconds or 0)
        elif action.name == "set_mode":
            self.set_mode(action.mode)
        else:
            raise ValueError(f"Unknown option action: {action.name}")

    def select(self, action: OptionAction, debug: bool = False) -> None:
        """Perform ``action`` as if its option was picked on the settings screen.

        Raises:
            OptionNotOfferedError: If the current screen has no such option.
            OptionDisabledError: If the option is shown but cannot be picked.
        """
        self._ensure_editable()
        option = find_option(self.ui_state(debug), action)
        if option is None:
            raise OptionNotOfferedError(f"{action} is not offered for thread {self.thread_id}")
        if not option.enabled:
            raise OptionDisabledError(f"{option.title!r} is disabled for thread {self.thread_id}")
        self.apply(action)

    async def commit(self) -> Event:
        """Persist the working mode and announce it to the thread.

        The outcome is returned and also published on :attr:`events`.
        """
        self._ensure_editable()
        self._phase = Phase.COMMITTING
        try:
            event = await self._commit()
        finally:
            self._phase = Phase.LOADED
        self.events.put_nowait(event)
        return event

    async def _commit(self) -> Event:
        state = self._state
        mode = normalize_for_commit(state.expiry_mode, state.is_group)
        address = state.address
        if address is None:
            logger.warning("No recipient address for thread %s, not committing", self.thread_id)
            return Event.FAIL

        timestamp = self._clock()
        config = ExpirationConfiguration(self.thread_id, mode, timestamp)
        try:
            await self._store.set_configuration(config)
        except StorageError:
            logger.exception("Failed to persist expiry settings for thread %s", self.thread_id)
            return Event.FAIL
        self.configuration = config

        message = ExpirationTimerUpdate(
            thread_id=self.thread_id,
            sender=self._local_address,
            recipient=address,
            sent_timestamp=timestamp,
            expiry_mode=mode,
            duration_seconds=mode.expiry_seconds,
        )
        try:
            await self._sender.send(message, address)
        except MessageSendError:
            logger.exception("Failed to queue timer update for thread %s", self.thread_id)
            return Event.FAIL

        try:
            await self._config_sync.force_sync_if_needed()
        except ConfigSyncError as exc:
            logger.warning("Configuration sync after commit failed: %s", exc)

        logger.info("Committed %r for thread %s", mode, self.thread_id)
        return Event.SUCCESS
