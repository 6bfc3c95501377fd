"""Explicit client-side mirror of the store, passed to render functions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from .models import Movie, StoreState
from .voting import TallyResult

if TYPE_CHECKING:
    from .catalog import MovieCatalog

MovieStatus = Literal["available", "watched", "removed"]

STATUS_ORDER: dict[str, int] = {"available": 0, "watched": 1, "removed": 2}


@dataclass(slots=True)
class WatchedMovie:
    """A catalog movie paired with the score it was watched with."""

    movie: Movie
    score: int | None = None


@dataclass(slots=True)
class PickerState:
    """Everything the picker views need to render."""

    available: list[Movie] = field(default_factory=list)
    watched: list[WatchedMovie] = field(default_factory=list)
    removed: list[Movie] = field(default_factory=list)
    current_selection: list[Movie] = field(default_factory=list)
    winner: TallyResult | None = None

    def watched_ids(self) -> set[int]:
        return {entry.movie.id for entry in self.watched}

    def removed_ids(self) -> set[int]:
        return {movie.id for movie in self.removed}

    def movie_status(self, movie_id: int) -> MovieStatus:
        if movie_id in self.watched_ids():
            return "watched"
        if movie_id in self.removed_ids():
            return "removed"
        return "available"

    def movie_score(self, movie_id: int) -> int | None:
        for entry in self.watched:
            if entry.movie.id == movie_id:
                return entry.score
        return None

    def sorted_watched(self) -> list[WatchedMovie]:
        """Scored movies by score descending, then unscored ones by title."""

        scored = [entry for entry in self.watched if entry.score is not None]
        unscored = [entry for entry in self.watched if entry.score is None]
        scored.sort(key=lambda entry: -entry.score)  # type: ignore[operator]
        unscored.sort(key=lambda entry: entry.movie.title.casefold())
        return scored + unscored


def state_from_snapshot(catalog: MovieCatalog, snapshot: StoreState) -> PickerState:
    """Resolve store identifiers against the catalog.

    Identifiers the catalog does not know are dropped. Available movies are
    the catalog minus the watched and removed ones.
    """

    watched: list[WatchedMovie] = []
    for entry in snapshot.watched:
        movie = catalog.get(entry.movie_id)
        if movie is not None:
            watched.append(WatchedMovie(movie=movie, score=entry.score))
    state = PickerState(
        watched=watched,
        removed=catalog.resolve(snapshot.removed),
        current_selection=catalog.resolve(snapshot.current_selection),
    )
    excluded = state.watched_ids() | state.removed_ids()
    state.available = [movie for movie in catalog if movie.id not in excluded]
    return state
