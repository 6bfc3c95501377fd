"""Movie catalog loading tests."""

from __future__ import annotations

import json

import pytest

from picker.catalog import MovieCatalog
from picker.models import Movie


def test_bundled_catalog_loads() -> None:
    catalog = MovieCatalog.from_file()

    assert len(catalog) > 0
    assert all(isinstance(movie, Movie) for movie in catalog)
    assert catalog.get(1) is not None


def test_catalog_reads_camel_case_trailer_ids(tmp_path) -> None:
    path = tmp_path / "movies.json"
    path.write_text(
        json.dumps(
            {"movies": [{"id": 3, "title": "Heat", "year": 1995, "genre": "Crime", "youtubeId": "xyz"}]}
        ),
        encoding="utf-8",
    )

    catalog = MovieCatalog.from_file(path)

    movie = catalog.get(3)
    assert movie is not None
    assert movie.youtube_id == "xyz"
    assert movie.thumbnail == "https://img.youtube.com/vi/xyz/mqdefault.jpg"
    assert movie.label() == "Heat (1995)"


def test_resolve_drops_unknown_ids(catalog: MovieCatalog) -> None:
    assert [movie.id for movie in catalog.resolve([3, 404, 1])] == [3, 1]
    assert 404 not in catalog
    assert 3 in catalog


def test_genres_are_sorted_and_distinct(catalog: MovieCatalog) -> None:
    assert catalog.genres() == ["Animation", "Comedy", "Crime", "Horror", "Sci-Fi"]


@pytest.mark.parametrize("payload", [[], {"movies": []}, "nope", [{"title": "No id"}]])
def test_invalid_catalogs_raise(payload) -> None:
    with pytest.raises(ValueError):
        MovieCatalog.from_payload(payload)


def test_duplicate_ids_raise() -> None:
    with pytest.raises(ValueError, match="Duplicate movie id 1"):
        MovieCatalog([Movie(id=1, title="A"), Movie(id=1, title="B")])
