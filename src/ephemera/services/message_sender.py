# src/ephemera/services/message_sender.py
"""Outbox-backed message sending.

Messages are serialized to their wire content and queued in the
``outbound_message`` table; delivery belongs to the transport layer.
"""

from __future__ import annotations

import dataclasses
import json
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ephemera.expiry.errors import MessageSendError
from ephemera.expiry.messages import Message
from ephemera.models import OutboundMessage

logger = logging.getLogger(__name__)


class OutboxMessageSender:
    """Queue outgoing messages for the transport layer."""

    def __init__(self, db: Session) -> None:
        self.db = db

    async def send(self, message: Message, to: str) -> None:
        """Queue ``message`` for ``to``; raises MessageSendError when it is invalid or not stored."""
        message = _with_recipient(message, to)
        if not message.is_valid():
            raise MessageSendError(f"Refusing to queue invalid {type(message).__name__}")

        content = message.to_wire_content()
        outbound = OutboundMessage(
            kind=type(message).__name__,
            thread_id=message.thread_id,
            recipient_address=to,
            sender_address=message.sender,
            sent_timestamp_ms=message.sent_timestamp,
            payload=json.dumps(content.to_dict(), sort_keys=True),
            status="pending",
            retry_count=0,
        )
        try:
            self.db.add(outbound)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise MessageSendError(f"Could not queue message for {to}") from exc
        logger.debug("Queued %s for %s (outbound id %s)", outbound.kind, to, outbound.id)

    def pending(self, limit: int = 50) -> list[OutboundMessage]:
        """Return pending outbound messages in queue order."""
        return (
            self.db.query(OutboundMessage)
            .filter(OutboundMessage.status == "pending")
            .order_by(OutboundMessage.id)
            .limit(limit)
            .all()
        )


def _with_recipient(message: Message, to: str) -> Message:
    if message.recipient == to:
        return message
    return dataclasses.replace(message, recipient=to)  # type: ignore[type-var]
