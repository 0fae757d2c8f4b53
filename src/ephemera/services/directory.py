# src/ephemera/services/directory.py
"""Thread, group and identity lookups backed by the database."""

from __future__ import annotations

from sqlalchemy.orm import Session

from ephemera.expiry.collaborators import Group, Recipient
from ephemera.models import ClosedGroup, Thread


class SqlRecipientLookup:
    """Resolve a thread's recipient from the ``thread`` table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    async def get_recipient(self, thread_id: int) -> Recipient | None:
        thread = self.db.get(Thread, thread_id)
        if thread is None or not thread.recipient_address:
            return None
        return Recipient(address=thread.recipient_address, is_closed_group=thread.is_closed_group)


class SqlGroupLookup:
    """Resolve closed group admins from ``closed_group``/``group_admin``."""

    def __init__(self, db: Session) -> None:
        self.db = db

    async def get_group(self, address: str) -> Group | None:
        group = self.db.get(ClosedGroup, address)
        if group is None:
            return None
        return Group(
            address=group.address,
            admins=frozenset(admin.admin_address for admin in group.admins),
        )


class StaticIdentity:
    """Local identity fixed for the lifetime of a request."""

    def __init__(self, address: str) -> None:
        self.address = address

    async def get_local_address(self) -> str:
        return self.address
