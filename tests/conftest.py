"""Pytest configuration and test helpers."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the application package is importable when running tests without an
# editable install. This mirrors the expected runtime layout where ``picker``
# sits at the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from picker.catalog import MovieCatalog  # noqa: E402
from picker.models import Movie  # noqa: E402


SAMPLE_MOVIES = [
    Movie(id=1, title="Alien", year=1979, genre="Horror", youtube_id="alien01"),
    Movie(id=2, title="Arrival", year=2016, genre="Sci-Fi", youtube_id="arrival2"),
    Movie(id=3, title="Brazil", year=1985, genre="Comedy", youtube_id="brazil03"),
    Movie(id=4, title="Coco", year=2017, genre="Animation", youtube_id="coco0004"),
    Movie(id=5, title="Dune", year=2021, genre="Sci-Fi", youtube_id="dune0005"),
    Movie(id=6, title="Elf", year=2003, genre="Comedy", youtube_id="elf00006"),
    Movie(id=7, title="Fargo", year=1996, genre="Crime", youtube_id="fargo007"),
    Movie(id=8, title="Gravity", year=2013, genre="Sci-Fi", youtube_id=None),
]


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


@pytest.fixture
def catalog() -> MovieCatalog:
    return MovieCatalog(SAMPLE_MOVIES)


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'movies.db'}"
