"""Rendering tests for the picker page."""

from __future__ import annotations

from picker.catalog import MovieCatalog
from picker.models import Movie
from picker.state import PickerState, WatchedMovie
from picker.voting import TallyResult
from picker.web import (
    render_all_movies,
    render_page,
    render_removed_list,
    render_selection,
    render_voting_form,
    render_watched_list,
    render_winner,
)


def test_empty_selection_prompts_for_new_movies() -> None:
    assert 'Click "Get New Movies" to start!' in render_selection([])
    assert render_voting_form([], 2) == ""


def test_selection_cards_include_thumbnail_and_remove_action(catalog: MovieCatalog) -> None:
    html = render_selection([catalog.get(2), catalog.get(8)])

    assert "https://img.youtube.com/vi/arrival2/mqdefault.jpg" in html
    assert 'data-action="remove" data-movie-id="2"' in html
    # Gravity has no trailer so it gets no poster.
    assert html.count('class="movie-poster"') == 1


def test_voting_form_has_a_select_per_voter_and_movie(catalog: MovieCatalog) -> None:
    movies = [catalog.get(1), catalog.get(2), catalog.get(3)]

    html = render_voting_form(movies, 3)

    assert html.count("<select") == 9
    assert 'name="voter-2-3"' in html
    assert '<option value="3">3</option>' in html
    assert '<option value="4">' not in html


def test_winner_panel_offers_to_record_points(catalog: MovieCatalog) -> None:
    movies = [catalog.get(1), catalog.get(2)]
    result = TallyResult(winner_id=2, points=4, totals={1: 2, 2: 4})

    html = render_winner(result, movies)

    assert "Tonight's Winner!" in html
    assert "Arrival" in html
    assert 'data-action="mark-watched" data-movie-id="2" data-score="4"' in html


def test_watched_list_shows_scores_and_placeholders(catalog: MovieCatalog) -> None:
    state = PickerState(
        watched=[
            WatchedMovie(catalog.get(6), None),
            WatchedMovie(catalog.get(3), 2),
            WatchedMovie(catalog.get(4), None),
            WatchedMovie(catalog.get(7), 9),
        ]
    )

    html = render_watched_list(state.sorted_watched())

    order = [html.index(title) for title in ("Fargo", "Brazil", "Coco", "Elf")]
    assert order == sorted(order)
    assert "9 pts" in html
    assert html.count("No score") == 2


def test_empty_lists_render_messages() -> None:
    assert "No movies watched yet" in render_watched_list([])
    assert "No removed movies" in render_removed_list([])
    assert "No movies match your filters" in render_all_movies([], PickerState())


def test_all_movies_shows_status_badges_and_actions(catalog: MovieCatalog) -> None:
    state = PickerState(
        available=[catalog.get(3)],
        watched=[WatchedMovie(catalog.get(1), 5)],
        removed=[catalog.get(2)],
    )

    html = render_all_movies([catalog.get(3), catalog.get(1), catalog.get(2)], state)

    assert "Watched (5 pts)" in html
    assert "movie-status-badge removed" in html
    assert 'data-action="mark-watched-from-list" data-movie-id="3"' in html
    assert 'data-action="unwatch" data-movie-id="1"' in html
    assert 'data-action="restore" data-movie-id="2"' in html


def test_titles_are_escaped() -> None:
    movie = Movie(id=99, title="<script>alert(1)</script>", year=2000, genre="Drama")

    html = render_removed_list([movie])

    assert "<script>alert" not in html
    assert "&lt;script&gt;" in html


def test_render_page_switches_tabs(catalog: MovieCatalog) -> None:
    state = PickerState(available=list(catalog))

    pick = render_page(state, app_name="Movie Night")
    removed = render_page(state, app_name="Movie Night", tab="removed")
    unknown = render_page(state, app_name="Movie Night", tab="bogus")

    assert 'id="tab-pick"' in pick
    assert "<title>Movie Night</title>" in pick
    assert 'id="tab-removed"' in removed
    assert 'id="tab-pick"' in unknown
    assert "__CONTENT__" not in pick
    assert "https://www.youtube.com/embed/" in pick
    assert 'data-action="new-selection"' in pick
    assert "'/actions/' + action" in pick


def test_render_page_shows_ballot_error(catalog: MovieCatalog) -> None:
    state = PickerState(current_selection=[catalog.get(1), catalog.get(2)])

    html = render_page(state, app_name="Movie Night", error="Rank every movie")

    assert 'class="error-banner">Rank every movie</div>' in html
