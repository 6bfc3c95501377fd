"""Weighted draw behaviour tests."""

from __future__ import annotations

import random
from collections import Counter

import pytest

from picker.catalog import MovieCatalog
from picker.selection import build_weighted_pool, genre_weights, select_movies
from picker.state import WatchedMovie


def test_select_returns_requested_number_of_distinct_movies(catalog: MovieCatalog) -> None:
    movies = list(catalog)

    drawn = select_movies(movies, [], 6, rng=random.Random(7))

    assert len(drawn) == 6
    assert len({movie.id for movie in drawn}) == 6
    assert all(movie in movies for movie in drawn)


@pytest.mark.parametrize("count", [1, 3, 5, 20])
def test_select_caps_count_at_available(catalog: MovieCatalog, count: int) -> None:
    available = list(catalog)[:5]

    drawn = select_movies(available, [], count, rng=random.Random(count))

    assert len(drawn) == min(count, len(available))
    assert len({movie.id for movie in drawn}) == len(drawn)
    assert {movie.id for movie in drawn} <= {movie.id for movie in available}


def test_select_with_empty_pool_returns_nothing(catalog: MovieCatalog) -> None:
    assert select_movies([], [WatchedMovie(catalog.get(1), 9)], 6) == []


def test_select_default_count_is_six(catalog: MovieCatalog) -> None:
    assert len(select_movies(list(catalog), [], rng=random.Random(1))) == 6


def test_genre_weights_ignore_unscored_watches(catalog: MovieCatalog) -> None:
    watched = [
        WatchedMovie(catalog.get(2), 20),
        WatchedMovie(catalog.get(5), 10),
        WatchedMovie(catalog.get(1), None),
    ]

    weights = genre_weights(watched)

    assert weights == {"Sci-Fi": pytest.approx(2.5)}


def test_weighted_pool_defaults_to_one(catalog: MovieCatalog) -> None:
    available = [catalog.get(movie_id) for movie_id in (1, 2, 3, 4)]

    pool = build_weighted_pool(available, [WatchedMovie(catalog.get(5), 30)])

    assert [item.weight for item in pool] == [1.0, pytest.approx(4.0), 1.0, 1.0]


def test_high_genre_scores_raise_selection_frequency(catalog: MovieCatalog) -> None:
    """Sci-Fi movies should be drawn first more often once Sci-Fi scored well."""

    available = [catalog.get(movie_id) for movie_id in (2, 3, 4, 7)]
    watched = [WatchedMovie(catalog.get(5), 40)]
    rng = random.Random(1234)

    first_picks = Counter(
        select_movies(available, watched, 1, rng=rng)[0].id for _ in range(4000)
    )
    baseline = Counter(
        select_movies(available, [], 1, rng=rng)[0].id for _ in range(4000)
    )

    # Weight 5 against three movies of weight 1 gives 5/8 of first picks.
    assert first_picks[2] > 2200
    assert baseline[2] < 1300
