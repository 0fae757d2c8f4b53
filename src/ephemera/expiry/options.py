"""Projection of settings state onto the options a client may offer.

Everything here is a pure function of :class:`SettingsState`. Type options
are hidden for note-to-self threads and for groups on the new configuration,
where the client shows a single timer list whose entries pick the mode
directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from ephemera.expiry.mode import (
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
    ExpirationType,
    ExpiryMode,
)

if TYPE_CHECKING:
    from ephemera.expiry.state import SettingsState

DEBUG_TIMES: tuple[int, ...] = (10, SECONDS_PER_MINUTE)
DEFAULT_TIMES: tuple[int, ...] = (
    12 * SECONDS_PER_HOUR,
    SECONDS_PER_DAY,
    7 * SECONDS_PER_DAY,
    14 * SECONDS_PER_DAY,
)
AFTER_SEND_TIMES: tuple[int, ...] = DEFAULT_TIMES
AFTER_READ_TIMES: tuple[int, ...] = (5 * SECONDS_PER_MINUTE, SECONDS_PER_HOUR) + DEFAULT_TIMES

DEBUG_SUBTITLE = "for testing purposes"

TYPE_TITLES: dict[ExpirationType, str] = {
    ExpirationType.NONE: "Off",
    ExpirationType.LEGACY: "Legacy",
    ExpirationType.AFTER_READ: "Disappear After Read",
    ExpirationType.AFTER_SEND: "Disappear After Send",
}
TYPE_SUBTITLES: dict[ExpirationType, str] = {
    ExpirationType.LEGACY: "Original version of disappearing messages.",
    ExpirationType.AFTER_READ: "Messages delete after they have been read.",
    ExpirationType.AFTER_SEND: "Messages delete after they have been sent.",
}

ActionName = Literal["set_type", "set_time", "set_mode"]


@dataclass(frozen=True)
class OptionAction:
    """Edit a client performs when an option is picked."""

    name: ActionName
    expiration_type: ExpirationType | None = None
    seconds: int | None = None

    @property
    def mode(self) -> ExpiryMode:
        """Mode carried by a ``set_mode`` action."""
        return (self.expiration_type or ExpirationType.NONE).mode(self.seconds or 0)


@dataclass(frozen=True)
class OptionModel:
    title: str
    action: OptionAction
    subtitle: str | None = None
    selected: bool = False
    enabled: bool = True


@dataclass(frozen=True)
class CardModel:
    title: str
    options: list[OptionModel]


@dataclass(frozen=True)
class UiState:
    cards: list[CardModel] = field(default_factory=list)
    show_group_footer: bool = False
    subtitle: str = ""


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_duration(seconds: int) -> str:
    """Return a human title for a timer duration, e.g. ``12 hours`` or ``2 weeks``."""
    if seconds <= 0:
        return "Off"
    week = 7 * SECONDS_PER_DAY
    for size, unit in (
        (week, "week"),
        (SECONDS_PER_DAY, "day"),
        (SECONDS_PER_HOUR, "hour"),
        (SECONDS_PER_MINUTE, "minute"),
    ):
        if seconds % size == 0:
            return _plural(seconds // size, unit)
    return _plural(seconds, "second")


def after_send_times(debug: bool = False) -> tuple[int, ...]:
    return (DEBUG_TIMES if debug else ()) + AFTER_SEND_TIMES


def after_read_times(debug: bool = False) -> tuple[int, ...]:
    return (DEBUG_TIMES if debug else ()) + AFTER_READ_TIMES


def _hides_type_step(state: SettingsState) -> bool:
    return state.is_note_to_self or (state.is_group and state.is_new_config_enabled)


def _type_option(
    expiration_type: ExpirationType,
    state: SettingsState,
    title: str | None = None,
    action: OptionAction | None = None,
) -> OptionModel:
    return OptionModel(
        title=title or TYPE_TITLES[expiration_type],
        subtitle=None if title else TYPE_SUBTITLES.get(expiration_type),
        action=action or OptionAction("set_type", expiration_type=expiration_type),
        selected=state.expiry_type == expiration_type,
        enabled=state.is_self_admin,
    )


def type_options(state: SettingsState) -> list[OptionModel] | None:
    """Return the selectable delete types, or None when the type step is skipped."""
    if _hides_type_step(state):
        return None
    options = [_type_option(ExpirationType.NONE, state)]
    if not state.is_new_config_enabled:
        options.append(_type_option(ExpirationType.LEGACY, state))
    else:
        if not state.is_group:
            options.append(_type_option(ExpirationType.AFTER_READ, state))
        options.append(_type_option(ExpirationType.AFTER_SEND, state))
    return options


def _time_option(seconds: int, state: SettingsState, action: OptionAction, debug: bool) -> OptionModel:
    return OptionModel(
        title=format_duration(seconds),
        subtitle=DEBUG_SUBTITLE if debug and seconds in DEBUG_TIMES else None,
        action=action,
        selected=state.duration == seconds,
        enabled=state.is_time_options_enabled,
    )


def time_options(state: SettingsState, debug: bool = False) -> list[OptionModel] | None:
    """Return the selectable timer durations, or None when no timer applies."""
    if _hides_type_step(state):
        off = _type_option(
            ExpirationType.NONE,
            state,
            title=TYPE_TITLES[ExpirationType.NONE],
            action=OptionAction("set_mode", expiration_type=ExpirationType.NONE),
        )
        return [off] + [
            _time_option(
                seconds,
                state,
                OptionAction("set_mode", expiration_type=ExpirationType.AFTER_SEND, seconds=seconds),
                debug,
            )
            for seconds in after_send_times(debug)
        ]

    if state.expiry_type == ExpirationType.AFTER_SEND:
        catalog = after_send_times(debug)
    elif state.expiry_type in (ExpirationType.LEGACY, ExpirationType.AFTER_READ):
        catalog = after_read_times(debug)
    else:
        return None
    return [
        _time_option(seconds, state, OptionAction("set_time", seconds=seconds), debug)
        for seconds in catalog
    ]


def build_ui_state(state: SettingsState, debug: bool = False) -> UiState:
    """Project ``state`` onto the cards a settings screen renders."""
    cards = []
    types = type_options(state)
    if types:
        cards.append(CardModel("Delete Type", types))
    times = time_options(state, debug)
    if times:
        cards.append(CardModel("Timer", times))
    return UiState(
        cards=cards,
        show_group_footer=state.is_group and state.is_new_config_enabled,
        subtitle=state.subtitle,
    )


def _same_action(offered: OptionAction, requested: OptionAction) -> bool:
    if offered.name != requested.name:
        return False
    if offered.name == "set_type":
        return offered.expiration_type == requested.expiration_type
    if offered.name == "set_time":
        return offered.seconds == requested.seconds
    return offered.mode == requested.mode


def find_option(ui: UiState, action: OptionAction) -> OptionModel | None:
    """Return the option of ``ui`` that performs ``action``, if any."""
    for card in ui.cards:
        for option in card.options:
            if _same_action(option.action, action):
                return option
    return None
