"""Read-only movie catalog consumed by the picker."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from pydantic import ValidationError

from .models import Movie

logger = logging.getLogger(__name__)

BUNDLED_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "movies.json"


class MovieCatalog:
    """Indexed, ordered view of the movie dataset."""

    def __init__(self, movies: Iterable[Movie]):
        self._movies: tuple[Movie, ...] = tuple(movies)
        self._by_id: dict[int, Movie] = {}
        for movie in self._movies:
            if movie.id in self._by_id:
                raise ValueError(f"Duplicate movie id {movie.id} in catalog")
            self._by_id[movie.id] = movie

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> "MovieCatalog":
        """Load a catalog from a JSON list, defaulting to the bundled sample."""

        catalog_path = Path(path) if path is not None else BUNDLED_CATALOG_PATH
        with catalog_path.open(encoding="utf-8") as handle:
            raw = json.load(handle)
        catalog = cls.from_payload(raw)
        logger.info("Loaded %d movies from %s", len(catalog), catalog_path)
        return catalog

    @classmethod
    def from_payload(cls, raw: object) -> "MovieCatalog":
        if isinstance(raw, dict):
            raw = raw.get("movies")
        if not isinstance(raw, list) or not raw:
            raise ValueError("Movie catalog must be a non-empty JSON list")
        try:
            movies = [Movie.model_validate(entry) for entry in raw]
        except ValidationError as exc:
            raise ValueError(f"Malformed movie catalog entry: {exc}") from exc
        return cls(movies)

    def __len__(self) -> int:
        return len(self._movies)

    def __iter__(self) -> Iterator[Movie]:
        return iter(self._movies)

    def __contains__(self, movie_id: object) -> bool:
        return movie_id in self._by_id

    @property
    def movies(self) -> tuple[Movie, ...]:
        return self._movies

    def get(self, movie_id: int) -> Movie | None:
        return self._by_id.get(movie_id)

    def resolve(self, movie_ids: Sequence[int]) -> list[Movie]:
        """Map identifiers to movies, dropping ids the catalog does not know."""

        resolved: list[Movie] = []
        for movie_id in movie_ids:
            movie = self._by_id.get(movie_id)
            if movie is None:
                logger.warning("Ignoring unknown movie id %s", movie_id)
                continue
            resolved.append(movie)
        return resolved

    def genres(self) -> list[str]:
        return sorted({movie.genre for movie in self._movies if movie.genre})
