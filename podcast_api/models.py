from __future__ import annotations

import asyncio
import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    event,
    func,
    inspect,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from podcast_api.database import Base
from podcast_api.security import hash_password, verify_password


class UserRole(str, enum.Enum):
    Client = "Client"
    Host = "Host"
    Admin = "Admin"


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    # Deferred: only loaded when a lookup asks for it explicitly (login).
    password: Mapped[str] = mapped_column(String(100), nullable=False, deferred=True)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole, name="user_role"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    async def check_password(self, candidate: str) -> bool:
        """Return True when *candidate* matches the stored password hash."""
        return await asyncio.to_thread(verify_password, candidate, self.password)


@event.listens_for(User, "before_insert")
def _hash_password_on_insert(mapper, connection, target: User) -> None:
    target.password = hash_password(target.password)


@event.listens_for(User, "before_update")
def _hash_password_on_update(mapper, connection, target: User) -> None:
    # Only re-hash when the password attribute was assigned in this unit of work.
    if inspect(target).attrs.password.history.has_changes():
        target.password = hash_password(target.password)


# ---------------------------------------------------------------------------
# Podcast
# ---------------------------------------------------------------------------
class Podcast(Base):
    __tablename__ = "podcasts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    rating: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    # lazy="noload" enforces explicit eager loading in stores; episode rows
    # are removed by the database-level ON DELETE CASCADE.
    episodes: Mapped[List["Episode"]] = relationship(
        "Episode", back_populates="podcast", lazy="noload", passive_deletes=True
    )


# ---------------------------------------------------------------------------
# Episode
# ---------------------------------------------------------------------------
class Episode(Base):
    __tablename__ = "episodes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    # Foreign key
    podcast_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("podcasts.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    podcast: Mapped["Podcast"] = relationship("Podcast", back_populates="episodes", lazy="noload")
