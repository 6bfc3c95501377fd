"""Configuration settings behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from picker.config import DEFAULT_DATABASE_URL, Settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.server_port == 3000
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.selection_size == 6
    assert settings.catalog_path is None


def test_database_path_builds_sqlite_url(tmp_path) -> None:
    settings = Settings(_env_file=None, DATABASE_PATH=str(tmp_path / "movies.db"))

    assert settings.database_url == f"sqlite+aiosqlite:///{tmp_path / 'movies.db'}"


def test_database_path_and_url_are_exclusive(tmp_path) -> None:
    with pytest.raises(ValueError, match="either DATABASE_URL or DATABASE_PATH"):
        Settings(
            _env_file=None,
            DATABASE_PATH=str(tmp_path / "movies.db"),
            DATABASE_URL="sqlite+aiosqlite:///other.db",
        )


def test_blank_catalog_path_falls_back_to_bundled() -> None:
    settings = Settings(_env_file=None, CATALOG_PATH="  ")

    assert settings.catalog_path is None


def test_catalog_path_is_parsed(tmp_path) -> None:
    settings = Settings(_env_file=None, CATALOG_PATH=str(tmp_path / "movies.json"))

    assert settings.catalog_path == Path(tmp_path / "movies.json")


@pytest.mark.parametrize("size", [0, 51])
def test_selection_size_bounds(size: int) -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, SELECTION_SIZE=size)
