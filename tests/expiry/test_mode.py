"""Tests for the expiry mode model."""

import copy
import pickle

import pytest

from ephemera.expiry.mode import (
    AfterRead,
    AfterSend,
    ExpirationType,
    ExpiryMode,
    Legacy,
    duration_of,
    make,
    type_of,
)


@pytest.mark.parametrize("expiration_type", list(ExpirationType))
@pytest.mark.parametrize("seconds", [0, -1, -86400])
def test_non_positive_duration_collapses_to_none(expiration_type, seconds) -> None:
    assert make(expiration_type, seconds) == ExpiryMode.NONE


@pytest.mark.parametrize("variant", [Legacy, AfterSend, AfterRead])
@pytest.mark.parametrize("seconds", [0, -1])
def test_variant_constructor_collapses_to_none(variant, seconds) -> None:
    mode = variant(seconds)
    assert mode is ExpiryMode.NONE
    assert type_of(mode) is ExpirationType.NONE
    assert duration_of(mode) is None
    assert variant(expiry_seconds=seconds) is ExpiryMode.NONE


@pytest.mark.parametrize("variant", [Legacy, AfterSend, AfterRead])
def test_timed_variants_survive_copy_and_pickle(variant) -> None:
    mode = variant(300)
    assert copy.deepcopy(mode) == mode
    assert pickle.loads(pickle.dumps(mode)) == mode


def test_make_builds_each_variant() -> None:
    assert make(ExpirationType.LEGACY, 60) == Legacy(60)
    assert make(ExpirationType.AFTER_SEND, 60) == AfterSend(60)
    assert make(ExpirationType.AFTER_READ, 60) == AfterRead(60)
    assert make(ExpirationType.NONE, 60) == ExpiryMode.NONE


def test_type_of_is_total() -> None:
    assert type_of(ExpiryMode.NONE) is ExpirationType.NONE
    assert type_of(Legacy(5)) is ExpirationType.LEGACY
    assert type_of(AfterSend(5)) is ExpirationType.AFTER_SEND
    assert type_of(AfterRead(5)) is ExpirationType.AFTER_READ


def test_type_and_make_are_inverse() -> None:
    for mode in (Legacy(300), AfterSend(3600), AfterRead(43200)):
        assert make(type_of(mode), mode.expiry_seconds) == mode
        assert mode.type.mode(mode.expiry_seconds) == mode


def test_duration_of() -> None:
    assert duration_of(ExpiryMode.NONE) is None
    assert duration_of(AfterRead(43200)) == 43200
    assert AfterSend(86400).duration == 86400
    assert ExpiryMode.NONE.expiry_seconds == 0


def test_variants_with_same_duration_are_distinct() -> None:
    assert Legacy(60) != AfterSend(60)
    assert AfterSend(60) != AfterRead(60)
    assert len({Legacy(60), AfterSend(60), AfterRead(60)}) == 3


def test_repr_names_the_variant() -> None:
    assert repr(ExpiryMode.NONE) == "ExpiryMode.NONE"
    assert repr(AfterRead(10)) == "AfterRead(10)"
