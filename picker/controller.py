"""Controller keeping a ``PickerState`` in sync with the store."""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, Sequence

import httpx

from .catalog import MovieCatalog
from .models import Movie
from .selection import DEFAULT_SELECTION_SIZE, select_movies
from .services.api_client import PickerApiClient
from .state import (
    STATUS_ORDER,
    MovieStatus,
    PickerState,
    WatchedMovie,
    state_from_snapshot,
)
from .voting import Ballot, TallyResult, tally_votes

logger = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[Any]]


class PickerEvent(str, Enum):
    """User actions the picker views can emit."""

    NEW_SELECTION = "new-selection"
    CALCULATE_WINNER = "calculate-winner"
    MARK_WATCHED = "mark-watched"
    MARK_WATCHED_FROM_LIST = "mark-watched-from-list"
    REMOVE = "remove"
    RESTORE = "restore"
    UNWATCH = "unwatch"


class EventDispatcher:
    """Registry routing picker events to async handlers."""

    def __init__(self) -> None:
        self._handlers: dict[PickerEvent, Handler] = {}

    def register(self, event: PickerEvent, handler: Handler) -> None:
        if event in self._handlers:
            raise ValueError(f"A handler is already registered for {event.value}")
        self._handlers[event] = handler

    def is_registered(self, event: PickerEvent) -> bool:
        return event in self._handlers

    async def dispatch(self, event: PickerEvent | str, *args: Any, **kwargs: Any) -> Any:
        try:
            resolved = PickerEvent(event)
        except ValueError as exc:
            raise LookupError(f"Unknown picker event {event!r}") from exc
        handler = self._handlers.get(resolved)
        if handler is None:
            raise LookupError(f"No handler registered for {resolved.value}")
        return await handler(*args, **kwargs)


class PickerController:
    """Performs store mutations over HTTP and patches the local state."""

    def __init__(
        self,
        catalog: MovieCatalog,
        api: PickerApiClient,
        *,
        selection_size: int = DEFAULT_SELECTION_SIZE,
        rng: random.Random | None = None,
        state: PickerState | None = None,
    ):
        self.catalog = catalog
        self.state = state or PickerState()
        self._api = api
        self._selection_size = selection_size
        self._rng = rng

    def bind(self, dispatcher: EventDispatcher) -> EventDispatcher:
        dispatcher.register(PickerEvent.NEW_SELECTION, self.new_selection)
        dispatcher.register(PickerEvent.CALCULATE_WINNER, self.calculate_winner)
        dispatcher.register(PickerEvent.MARK_WATCHED, self.mark_watched)
        dispatcher.register(
            PickerEvent.MARK_WATCHED_FROM_LIST, self.mark_watched_from_list
        )
        dispatcher.register(PickerEvent.REMOVE, self.remove_movie)
        dispatcher.register(PickerEvent.RESTORE, self.restore_movie)
        dispatcher.register(PickerEvent.UNWATCH, self.unwatch_movie)
        return dispatcher

    async def load_state(self) -> PickerState:
        """Rebuild the local state from ``/api/state``.

        When the server cannot be reached the whole catalog is treated as
        available so the picker stays usable.
        """

        try:
            snapshot = await self._api.get_state()
        except httpx.HTTPError:
            logger.exception("Failed to load state, treating every movie as available")
            self.state.available = list(self.catalog)
            return self.state

        self.state = state_from_snapshot(self.catalog, snapshot)
        return self.state

    async def new_selection(self) -> list[Movie]:
        """Draw a fresh weighted selection and persist it.

        When the store rejects the draw the previous selection is kept and
        returned.
        """

        state = self.state
        drawn = select_movies(
            state.available, state.watched, self._selection_size, rng=self._rng
        )
        if await self._call(
            "set selection", self._api.set_selection([movie.id for movie in drawn])
        ):
            state.current_selection = drawn
            state.winner = None
        return state.current_selection

    async def calculate_winner(self, ballots: Sequence[Ballot]) -> TallyResult:
        """Run the Borda tally; invalid ballots raise ``InvalidBallotError``."""

        movie_ids = [movie.id for movie in self.state.current_selection]
        result = tally_votes(movie_ids, ballots)
        self.state.winner = result
        return result

    async def mark_watched(self, movie_id: int, score: int | None) -> bool:
        movie = self.catalog.get(movie_id)
        if movie is None:
            return False
        if not await self._call("mark watched", self._api.mark_watched(movie_id, score)):
            return False
        if not await self._call("clear selection", self._api.set_selection([])):
            return False

        state = self.state
        state.available = _without(state.available, movie_id)
        state.removed = _without(state.removed, movie_id)
        state.watched = [entry for entry in state.watched if entry.movie.id != movie_id]
        state.watched.append(WatchedMovie(movie=movie, score=score))
        state.current_selection = []
        state.winner = None
        return True

    async def mark_watched_from_list(self, movie_id: int) -> bool:
        """Mark a movie watched without a score from the full movie list.

        The existing watched entries are not checked before appending, so two
        calls before a reload leave a duplicate entry in the local state.
        """

        movie = self.catalog.get(movie_id)
        if movie is None:
            return False
        if not await self._call("mark watched", self._api.mark_watched(movie_id, None)):
            return False

        state = self.state
        state.available = _without(state.available, movie_id)
        state.current_selection = _without(state.current_selection, movie_id)
        state.watched.append(WatchedMovie(movie=movie, score=None))
        return True

    async def remove_movie(self, movie_id: int) -> bool:
        movie = self.catalog.get(movie_id)
        if movie is None:
            return False
        if not await self._call("remove", self._api.remove(movie_id)):
            return False

        state = self.state
        state.available = _without(state.available, movie_id)
        state.current_selection = _without(state.current_selection, movie_id)
        state.watched = [entry for entry in state.watched if entry.movie.id != movie_id]
        if movie_id not in state.removed_ids():
            state.removed.append(movie)
        return True

    async def restore_movie(self, movie_id: int) -> bool:
        if not await self._call("restore", self._api.restore(movie_id)):
            return False

        state = self.state
        for movie in state.removed:
            if movie.id == movie_id:
                state.removed = _without(state.removed, movie_id)
                state.available.append(movie)
                break
        return True

    async def unwatch_movie(self, movie_id: int) -> bool:
        if not await self._call("unwatch", self._api.unwatch(movie_id)):
            return False

        state = self.state
        for entry in state.watched:
            if entry.movie.id == movie_id:
                state.watched = [
                    item for item in state.watched if item.movie.id != movie_id
                ]
                state.available.append(entry.movie)
                break
        return True

    def movie_status(self, movie_id: int) -> MovieStatus:
        return self.state.movie_status(movie_id)

    def movie_score(self, movie_id: int) -> int | None:
        return self.state.movie_score(movie_id)

    def genres(self) -> list[str]:
        return self.catalog.genres()

    def filter_catalog(
        self,
        *,
        search: str = "",
        genre: str = "",
        status: str = "",
    ) -> list[Movie]:
        """Filter the catalog the way the "all movies" tab does.

        Results are ordered available, watched, removed and then by title.
        """

        needle = search.strip().casefold()
        movies: list[Movie] = []
        for movie in self.catalog:
            if needle and needle not in movie.title.casefold():
                continue
            if genre and movie.genre != genre:
                continue
            if status and self.state.movie_status(movie.id) != status:
                continue
            movies.append(movie)

        movies.sort(
            key=lambda movie: (
                STATUS_ORDER[self.state.movie_status(movie.id)],
                movie.title.casefold(),
            )
        )
        return movies

    async def _call(self, action: str, request: Awaitable[Any]) -> bool:
        try:
            await request
        except httpx.HTTPError:
            logger.exception("Failed to %s", action)
            return False
        return True


def _without(movies: list[Movie], movie_id: int) -> list[Movie]:
    return [movie for movie in movies if movie.id != movie_id]


def ballots_from_form(
    form: Mapping[str, str], movie_ids: Sequence[int], voter_count: int
) -> list[dict[int, int | None]]:
    """Read ``voter-<n>-<movieId>`` rank fields posted by the voting form."""

    ballots: list[dict[int, int | None]] = []
    for voter in range(voter_count):
        ballot: dict[int, int | None] = {}
        for movie_id in movie_ids:
            raw = (form.get(f"voter-{voter}-{movie_id}") or "").strip()
            try:
                ballot[movie_id] = int(raw)
            except ValueError:
                ballot[movie_id] = None
        ballots.append(ballot)
    return ballots
