"""Weighted random drawing of candidate movies."""

from __future__ import annotations

import random
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from .models import Movie

if TYPE_CHECKING:
    from .state import WatchedMovie

DEFAULT_SELECTION_SIZE = 6


@dataclass(slots=True)
class WeightedMovie:
    movie: Movie
    weight: float


def genre_weights(watched: Sequence["WatchedMovie"]) -> dict[str, float]:
    """Return ``1 + average score / 10`` for every genre with a scored watch."""

    scores: dict[str, list[int]] = defaultdict(list)
    for entry in watched:
        if entry.score is None:
            continue
        scores[entry.movie.genre].append(entry.score)
    return {
        genre: 1 + (sum(values) / len(values)) / 10
        for genre, values in scores.items()
    }


def build_weighted_pool(
    available: Sequence[Movie], watched: Sequence["WatchedMovie"]
) -> list[WeightedMovie]:
    weights = genre_weights(watched)
    return [
        WeightedMovie(movie=movie, weight=weights.get(movie.genre, 1.0))
        for movie in available
    ]


def select_movies(
    available: Sequence[Movie],
    watched: Sequence["WatchedMovie"],
    count: int = DEFAULT_SELECTION_SIZE,
    *,
    rng: random.Random | None = None,
) -> list[Movie]:
    """Draw up to ``count`` distinct movies, favouring well-scored genres.

    Each draw walks the remaining pool subtracting weights from a uniform
    point in ``[0, total)`` and takes the item where the running value drops
    to zero or below. The picked item leaves the pool before the next draw.
    """

    if not available or count <= 0:
        return []

    generator = rng or random.Random()
    pool = build_weighted_pool(available, watched)
    selected: list[Movie] = []

    while len(selected) < count and pool:
        total_weight = sum(item.weight for item in pool)
        point = generator.random() * total_weight
        index = len(pool) - 1
        for position, item in enumerate(pool):
            point -= item.weight
            if point <= 0:
                index = position
                break
        selected.append(pool.pop(index).movie)

    return selected
