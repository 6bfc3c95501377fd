from __future__ import annotations

import asyncio

from sqlalchemy import create_engine, inspect

from picker.database import Database
from picker.db_models import RemovedRecord, WatchedRecord


def test_create_all_builds_store_tables(tmp_path) -> None:
    """A fresh database should get the watched, removed and selection tables."""

    database_path = tmp_path / "fresh.db"
    database = Database(f"sqlite+aiosqlite:///{database_path}")
    asyncio.run(database.create_all())
    asyncio.run(database.dispose())

    inspector_engine = create_engine(f"sqlite:///{database_path}")
    try:
        inspector = inspect(inspector_engine)
        tables = set(inspector.get_table_names())
        watched_columns = {column["name"] for column in inspector.get_columns("watched")}
    finally:
        inspector_engine.dispose()

    assert {"watched", "removed", "current_selection"} <= tables
    assert watched_columns == {"movie_id", "score", "watched_at"}


def test_records_default_their_timestamps(tmp_path) -> None:
    async def runner() -> None:
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'stamps.db'}")
        await database.create_all()
        async with database.session() as session:
            session.add(WatchedRecord(movie_id=1, score=None))
            session.add(RemovedRecord(movie_id=2))
            await session.commit()

            watched = await session.get(WatchedRecord, 1)
            removed = await session.get(RemovedRecord, 2)
            assert watched is not None and watched.watched_at is not None
            assert removed is not None and removed.removed_at is not None
        await database.dispose()

    asyncio.run(runner())
