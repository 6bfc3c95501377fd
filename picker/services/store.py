"""Persistence of watched, removed and current-selection records."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from sqlalchemy import delete, select

from ..database import Database
from ..db_models import RemovedRecord, SelectionRecord, WatchedRecord
from ..models import StoreState, WatchedEntry
from ..utils import dedupe_ids

logger = logging.getLogger(__name__)


class MovieStore:
    """Server-authoritative CRUD over the three keyed tables."""

    def __init__(self, database: Database):
        self._database = database

    async def get_state(self) -> StoreState:
        async with self._database.session() as session:
            watched = await session.execute(
                select(WatchedRecord.movie_id, WatchedRecord.score)
            )
            removed = await session.execute(select(RemovedRecord.movie_id))
            selection = await session.execute(select(SelectionRecord.movie_id))
            return StoreState(
                watched=[
                    WatchedEntry(movie_id=movie_id, score=score)
                    for movie_id, score in watched.all()
                ],
                removed=list(removed.scalars().all()),
                current_selection=list(selection.scalars().all()),
            )

    async def set_selection(self, movie_ids: Sequence[int]) -> None:
        """Replace the whole current selection with ``movie_ids``."""

        now = datetime.utcnow()
        unique_ids = dedupe_ids(movie_ids)
        async with self._database.session() as session:
            await session.execute(delete(SelectionRecord))
            session.add_all(
                SelectionRecord(movie_id=movie_id, selected_at=now)
                for movie_id in unique_ids
            )
            await session.commit()
        logger.info("Current selection set to %s", unique_ids)

    async def mark_watched(self, movie_id: int, score: int | None) -> None:
        """Upsert a watched record, clearing the movie from the other tables."""

        async with self._database.session() as session:
            await session.execute(
                delete(SelectionRecord).where(SelectionRecord.movie_id == movie_id)
            )
            await session.execute(
                delete(RemovedRecord).where(RemovedRecord.movie_id == movie_id)
            )
            record = await session.get(WatchedRecord, movie_id)
            if record is None:
                session.add(
                    WatchedRecord(
                        movie_id=movie_id, score=score, watched_at=datetime.utcnow()
                    )
                )
            else:
                record.score = score
            await session.commit()
        logger.info("Marked movie %s watched with score %s", movie_id, score)

    async def unwatch(self, movie_id: int) -> None:
        async with self._database.session() as session:
            await session.execute(
                delete(WatchedRecord).where(WatchedRecord.movie_id == movie_id)
            )
            await session.commit()

    async def remove(self, movie_id: int) -> None:
        """Take a movie out of consideration; repeated calls are no-ops."""

        async with self._database.session() as session:
            await session.execute(
                delete(SelectionRecord).where(SelectionRecord.movie_id == movie_id)
            )
            await session.execute(
                delete(WatchedRecord).where(WatchedRecord.movie_id == movie_id)
            )
            if await session.get(RemovedRecord, movie_id) is None:
                session.add(
                    RemovedRecord(movie_id=movie_id, removed_at=datetime.utcnow())
                )
            await session.commit()
        logger.info("Removed movie %s from consideration", movie_id)

    async def restore(self, movie_id: int) -> None:
        async with self._database.session() as session:
            await session.execute(
                delete(RemovedRecord).where(RemovedRecord.movie_id == movie_id)
            )
            await session.commit()
