# src/ephemera/models/user.py
"""SQLAlchemy model for the local account using this instance."""

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from ephemera.db.session import Base


class LocalUser(Base):
    """Account identified by its session address (hex public key)."""

    __tablename__ = "local_user"

    address: Mapped[str] = mapped_column(Text, primary_key=True)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
