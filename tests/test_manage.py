"""Tests for the database management commands."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from ephemera.core.security import decode_subject
from ephemera.models import ClosedGroup, LocalUser, Thread
from ephemera.scripts import manage
from tests.conftest import GROUP_ADDRESS, LOCAL_ADDRESS, OTHER_ADDRESS


def test_add_user_is_idempotent(db_session: Session) -> None:
    manage.add_user(db_session, LOCAL_ADDRESS, "Alice")
    manage.add_user(db_session, LOCAL_ADDRESS, "Alice B")

    assert db_session.query(LocalUser).count() == 1
    assert db_session.get(LocalUser, LOCAL_ADDRESS).display_name == "Alice B"


def test_add_group_syncs_admins(db_session: Session) -> None:
    manage.add_group(db_session, GROUP_ADDRESS, [LOCAL_ADDRESS], title="Team")
    group = manage.add_group(db_session, GROUP_ADDRESS, [OTHER_ADDRESS, LOCAL_ADDRESS])

    assert {admin.admin_address for admin in group.admins} == {LOCAL_ADDRESS, OTHER_ADDRESS}

    group = manage.add_group(db_session, GROUP_ADDRESS, [OTHER_ADDRESS], title="Team")
    assert [admin.admin_address for admin in group.admins] == [OTHER_ADDRESS]
    assert db_session.get(ClosedGroup, GROUP_ADDRESS).title == "Team"


def test_add_thread(db_session: Session) -> None:
    thread = manage.add_thread(db_session, GROUP_ADDRESS, is_closed_group=True)
    stored = db_session.get(Thread, thread.id)
    assert stored.recipient_address == GROUP_ADDRESS
    assert stored.is_closed_group is True


def test_token_command(capsys: pytest.CaptureFixture[str]) -> None:
    manage.main(["token", LOCAL_ADDRESS])
    token = capsys.readouterr().out.strip()
    assert decode_subject(token) == LOCAL_ADDRESS


def test_add_user_command_uses_session_factory(db_session: Session, mocker, capsys) -> None:
    mocker.patch.object(manage, "SessionLocal", return_value=db_session)
    mocker.patch.object(db_session, "close")
    manage.main(["add-user", OTHER_ADDRESS, "--name", "Bob"])

    assert "ready" in capsys.readouterr().out
    assert db_session.get(LocalUser, OTHER_ADDRESS).display_name == "Bob"
