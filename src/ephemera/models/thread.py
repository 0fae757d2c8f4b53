# src/ephemera/models/thread.py
"""Models describing conversation threads and closed groups."""

from sqlalchemy import BigInteger, Boolean, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ephemera.db.session import Base


class Thread(Base):
    """A conversation thread addressed to a single recipient or closed group."""

    __tablename__ = "thread"

    # SQLite only auto-increments an INTEGER PRIMARY KEY.
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    recipient_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_closed_group: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class ClosedGroup(Base):
    """Closed group metadata keyed by the group's address."""

    __tablename__ = "closed_group"

    address: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)

    admins: Mapped[list["GroupAdmin"]] = relationship(
        "GroupAdmin",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class GroupAdmin(Base):
    """Join table mapping admin addresses into closed groups."""

    __tablename__ = "group_admin"

    group_address: Mapped[str] = mapped_column(
        Text,
        ForeignKey("closed_group.address", ondelete="CASCADE"),
        primary_key=True,
    )
    admin_address: Mapped[str] = mapped_column(Text, primary_key=True)
    # Presence implies admin rights.
