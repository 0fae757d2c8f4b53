"""SQLAlchemy model for queued outgoing protocol messages."""

from sqlalchemy import VARCHAR, BigInteger, Integer, SmallInteger, Text
from sqlalchemy.orm import Mapped, mapped_column

from ephemera.db.session import Base


class OutboundMessage(Base):
    """Outgoing message awaiting delivery by the transport layer."""

    __tablename__ = "outbound_message"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    kind: Mapped[str] = mapped_column(Text, nullable=False)  # e.g., 'ExpirationTimerUpdate'
    thread_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    recipient_address: Mapped[str] = mapped_column(Text, nullable=False)
    sender_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    sent_timestamp_ms: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)  # JSON wire content
    status: Mapped[str] = mapped_column(
        VARCHAR(20), nullable=False, default="pending", index=True
    )  # 'pending', 'sent', 'failed'
    retry_count: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
