"""Tests for the option-list projection of settings state."""

from ephemera.expiry.mode import AfterRead, AfterSend, ExpirationType, ExpiryMode, Legacy
from ephemera.expiry.options import (
    AFTER_READ_TIMES,
    AFTER_SEND_TIMES,
    DEBUG_SUBTITLE,
    OptionAction,
    build_ui_state,
    format_duration,
    time_options,
    type_options,
)
from ephemera.expiry.state import SettingsState

HOUR = 3600
DAY = 86400


def _types(options):
    return [option.action.expiration_type for option in options]


def test_catalogs() -> None:
    assert AFTER_SEND_TIMES == (12 * HOUR, DAY, 7 * DAY, 14 * DAY)
    assert AFTER_READ_TIMES == (300, HOUR, 12 * HOUR, DAY, 7 * DAY, 14 * DAY)


def test_one_to_one_thread_with_new_config() -> None:
    state = SettingsState(expiry_mode=AfterRead(12 * HOUR))

    types = type_options(state)
    assert _types(types) == [
        ExpirationType.NONE,
        ExpirationType.AFTER_READ,
        ExpirationType.AFTER_SEND,
    ]
    assert [option.selected for option in types] == [False, True, False]
    assert all(option.enabled for option in types)

    times = time_options(state)
    assert [option.action.seconds for option in times] == list(AFTER_READ_TIMES)
    assert [option.selected for option in times] == [False, False, True, False, False, False]
    assert all(option.enabled for option in times)
    assert all(option.action.name == "set_time" for option in times)


def test_after_send_uses_narrower_catalog() -> None:
    state = SettingsState(expiry_mode=AfterSend(DAY))
    assert [option.action.seconds for option in time_options(state)] == list(AFTER_SEND_TIMES)


def test_legacy_shares_after_read_catalog() -> None:
    state = SettingsState(expiry_mode=Legacy(HOUR), is_new_config_enabled=False)
    assert [option.action.seconds for option in time_options(state)] == list(AFTER_READ_TIMES)


def test_legacy_client_offers_legacy_type_only() -> None:
    state = SettingsState(expiry_mode=ExpiryMode.NONE, is_new_config_enabled=False)
    assert _types(type_options(state)) == [ExpirationType.NONE, ExpirationType.LEGACY]


def test_no_timer_card_when_off() -> None:
    state = SettingsState(expiry_mode=ExpiryMode.NONE)
    assert time_options(state) is None
    ui = build_ui_state(state)
    assert [card.title for card in ui.cards] == ["Delete Type"]
    assert ui.cards[0].options[0].selected


def test_note_to_self_skips_type_step() -> None:
    state = SettingsState(is_note_to_self=True, expiry_mode=AfterSend(DAY))
    assert type_options(state) is None

    times = time_options(state)
    assert times[0].title == "Off"
    assert times[0].action == OptionAction("set_mode", expiration_type=ExpirationType.NONE)
    assert [option.action.seconds for option in times[1:]] == list(AFTER_SEND_TIMES)
    assert all(option.action.name == "set_mode" for option in times)
    assert [option.selected for option in times] == [False, False, True, False, False]
    assert times[2].action.mode == AfterSend(DAY)


def test_note_to_self_selects_off_when_disabled() -> None:
    state = SettingsState(is_note_to_self=True, expiry_mode=ExpiryMode.NONE)
    times = time_options(state)
    assert times[0].selected
    assert not any(option.selected for option in times[1:])


def test_new_config_group_admin() -> None:
    state = SettingsState(is_group=True, expiry_mode=AfterSend(7 * DAY))
    ui = build_ui_state(state)
    assert [card.title for card in ui.cards] == ["Timer"]
    assert ui.show_group_footer
    assert all(option.enabled for option in ui.cards[0].options)


def test_group_non_admin_sees_everything_disabled() -> None:
    for is_new_config_enabled, mode in ((True, AfterSend(DAY)), (False, Legacy(DAY))):
        state = SettingsState(
            is_group=True,
            is_self_admin=False,
            is_new_config_enabled=is_new_config_enabled,
            expiry_mode=mode,
        )
        ui = build_ui_state(state)
        assert ui.cards
        for card in ui.cards:
            assert not any(option.enabled for option in card.options)


def test_legacy_group_locks_directional_timer() -> None:
    state = SettingsState(is_group=True, is_new_config_enabled=False, expiry_mode=AfterSend(DAY))
    assert not state.is_time_options_enabled
    assert not any(option.enabled for option in time_options(state))
    assert not build_ui_state(state).show_group_footer


def test_legacy_group_admin_can_edit_legacy_timer() -> None:
    state = SettingsState(is_group=True, is_new_config_enabled=False, expiry_mode=Legacy(DAY))
    assert _types(type_options(state)) == [ExpirationType.NONE, ExpirationType.LEGACY]
    assert all(option.enabled for option in time_options(state))


def test_debug_times_are_prepended() -> None:
    state = SettingsState(expiry_mode=AfterRead(10))
    times = time_options(state, debug=True)
    assert [option.action.seconds for option in times[:3]] == [10, 60, 300]
    assert times[0].selected
    assert times[0].subtitle == DEBUG_SUBTITLE
    assert times[2].subtitle is None
    assert time_options(state)[0].action.seconds == 300


def test_subtitles() -> None:
    assert "everyone" in build_ui_state(SettingsState(is_group=True)).subtitle
    assert "you send" in build_ui_state(SettingsState()).subtitle


def test_format_duration() -> None:
    assert format_duration(10) == "10 seconds"
    assert format_duration(60) == "1 minute"
    assert format_duration(300) == "5 minutes"
    assert format_duration(HOUR) == "1 hour"
    assert format_duration(12 * HOUR) == "12 hours"
    assert format_duration(DAY) == "1 day"
    assert format_duration(7 * DAY) == "1 week"
    assert format_duration(14 * DAY) == "2 weeks"
    assert format_duration(0) == "Off"
