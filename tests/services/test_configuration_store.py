"""Tests for the SQL configuration store."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from ephemera.expiry.collaborators import ExpirationConfiguration
from ephemera.expiry.errors import StorageError
from ephemera.expiry.mode import AfterRead, AfterSend, ExpiryMode
from ephemera.models import ExpirationConfigurationRecord, Thread
from ephemera.services.configuration_store import SqlConfigurationStore


@pytest.mark.asyncio
async def test_missing_configuration_returns_none(db_session: Session, direct_thread: Thread) -> None:
    store = SqlConfigurationStore(db_session)
    assert await store.get_configuration(direct_thread.id) is None


@pytest.mark.asyncio
async def test_set_then_get_replaces_the_row(db_session: Session, direct_thread: Thread) -> None:
    store = SqlConfigurationStore(db_session)
    await store.set_configuration(ExpirationConfiguration(direct_thread.id, AfterRead(300), 10))
    await store.set_configuration(ExpirationConfiguration(direct_thread.id, AfterSend(3600), 20))

    config = await store.get_configuration(direct_thread.id)
    assert config == ExpirationConfiguration(direct_thread.id, AfterSend(3600), 20)
    assert db_session.query(ExpirationConfigurationRecord).count() == 1


@pytest.mark.asyncio
async def test_off_is_stored_as_none(db_session: Session, direct_thread: Thread) -> None:
    store = SqlConfigurationStore(db_session)
    await store.set_configuration(ExpirationConfiguration(direct_thread.id, ExpiryMode.NONE, 5))

    record = db_session.get(ExpirationConfigurationRecord, direct_thread.id)
    assert (record.expiry_type, record.expiry_seconds) == ("none", 0)
    config = await store.get_configuration(direct_thread.id)
    assert config.expiry_mode == ExpiryMode.NONE


@pytest.mark.asyncio
async def test_unknown_stored_type_reads_as_off(db_session: Session, direct_thread: Thread) -> None:
    db_session.add(
        ExpirationConfigurationRecord(
            thread_id=direct_thread.id, expiry_type="bogus", expiry_seconds=60, updated_at_ms=1
        )
    )
    db_session.commit()

    config = await SqlConfigurationStore(db_session).get_configuration(direct_thread.id)
    assert config.expiry_mode == ExpiryMode.NONE


@pytest.mark.asyncio
async def test_database_error_raises_storage_error(
    db_session: Session, direct_thread: Thread, mocker
) -> None:
    store = SqlConfigurationStore(db_session)
    mocker.patch.object(
        db_session, "commit", side_effect=OperationalError("UPDATE", {}, Exception("locked"))
    )
    rollback = mocker.spy(db_session, "rollback")

    with pytest.raises(StorageError):
        await store.set_configuration(ExpirationConfiguration(direct_thread.id, AfterRead(60), 1))
    rollback.assert_called_once()


@pytest.mark.asyncio
async def test_changed_since_orders_by_update_time(db_session: Session) -> None:
    threads = [Thread(recipient_address=f"05{i:02d}") for i in range(3)]
    db_session.add_all(threads)
    db_session.commit()
    store = SqlConfigurationStore(db_session)
    await store.set_configuration(ExpirationConfiguration(threads[0].id, AfterRead(60), 300))
    await store.set_configuration(ExpirationConfiguration(threads[1].id, AfterRead(60), 100))
    await store.set_configuration(ExpirationConfiguration(threads[2].id, AfterRead(60), 200))

    changed = store.changed_since(100)
    assert [config.thread_id for config in changed] == [threads[2].id, threads[0].id]
    assert store.changed_since(300) == []
