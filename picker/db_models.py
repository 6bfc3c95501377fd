"""SQLAlchemy ORM models backing the persistent state."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class WatchedRecord(Base):
    """A movie the household has watched, with the winning score if any."""

    __tablename__ = "watched"

    movie_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False
    )
    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    watched_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class RemovedRecord(Base):
    """A movie taken out of consideration."""

    __tablename__ = "removed"

    movie_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False
    )
    removed_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class SelectionRecord(Base):
    """A movie in the current selection up for a vote."""

    __tablename__ = "current_selection"

    movie_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False
    )
    selected_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
