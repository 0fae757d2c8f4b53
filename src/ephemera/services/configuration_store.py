# src/ephemera/services/configuration_store.py
"""SQL-backed storage of per-thread expiration configurations."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ephemera.expiry.collaborators import ExpirationConfiguration
from ephemera.expiry.errors import StorageError
from ephemera.expiry.mode import ExpirationType, make
from ephemera.models import ExpirationConfigurationRecord

logger = logging.getLogger(__name__)


def _to_configuration(record: ExpirationConfigurationRecord) -> ExpirationConfiguration:
    try:
        expiration_type = ExpirationType(record.expiry_type)
    except ValueError:
        logger.warning(
            "Unknown expiry type %r stored for thread %s, treating as none",
            record.expiry_type,
            record.thread_id,
        )
        expiration_type = ExpirationType.NONE
    return ExpirationConfiguration(
        thread_id=record.thread_id,
        expiry_mode=make(expiration_type, record.expiry_seconds),
        updated_at_ms=record.updated_at_ms,
    )


class SqlConfigurationStore:
    """Configuration store over a SQLAlchemy session (one row per thread)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    async def get_configuration(self, thread_id: int) -> ExpirationConfiguration | None:
        record = self.db.get(ExpirationConfigurationRecord, thread_id)
        if record is None:
            return None
        return _to_configuration(record)

    async def set_configuration(self, config: ExpirationConfiguration) -> None:
        """Insert or replace the configuration row of ``config.thread_id``."""
        mode = config.expiry_mode
        try:
            record = self.db.get(ExpirationConfigurationRecord, config.thread_id)
            if record is None:
                record = ExpirationConfigurationRecord(thread_id=config.thread_id)
                self.db.add(record)
            record.expiry_type = mode.type.value
            record.expiry_seconds = mode.expiry_seconds
            record.updated_at_ms = config.updated_at_ms
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(
                f"Could not store expiration configuration for thread {config.thread_id}"
            ) from exc

    def changed_since(self, watermark_ms: int) -> list[ExpirationConfiguration]:
        """Return configurations updated after ``watermark_ms``, oldest first."""
        records = (
            self.db.query(ExpirationConfigurationRecord)
            .filter(ExpirationConfigurationRecord.updated_at_ms > watermark_ms)
            .order_by(ExpirationConfigurationRecord.updated_at_ms)
            .all()
        )
        return [_to_configuration(record) for record in records]
