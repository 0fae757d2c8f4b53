# src/ephemera/models/expiration.py
"""Persisted disappearing-message configuration per thread."""

from sqlalchemy import VARCHAR, BigInteger, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from ephemera.db.session import Base


class ExpirationConfigurationRecord(Base):
    """Latest expiration configuration of a thread, superseded on every change."""

    __tablename__ = "expiration_configuration"

    thread_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("thread.id", ondelete="CASCADE"),
        primary_key=True,
    )
    expiry_type: Mapped[str] = mapped_column(
        VARCHAR(20), nullable=False, default="none"
    )  # 'none', 'legacy', 'after_send', 'after_read'
    expiry_seconds: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    updated_at_ms: Mapped[int] = mapped_column(BigInteger, nullable=False)


class ConfigSyncState(Base):
    """Watermark of the newest configuration change pushed by config sync."""

    __tablename__ = "config_sync_state"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, default=1)
    last_synced_at_ms: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
