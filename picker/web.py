"""HTML rendering for the picker page.

Every function here is pure: it receives the explicit ``PickerState`` (or
pieces of it) and returns markup, so the page can be rendered and tested
without a running server.
"""

from __future__ import annotations

from html import escape
from textwrap import dedent
from typing import Sequence

from .controller import PickerEvent
from .models import Movie
from .state import PickerState, WatchedMovie
from .utils import TRAILER_EMBED_PREFIX
from .voting import TallyResult

TABS: tuple[tuple[str, str], ...] = (
    ("pick", "Pick a Movie"),
    ("watched", "Watched"),
    ("removed", "Removed"),
    ("all", "All Movies"),
)

STATUS_FILTERS: tuple[tuple[str, str], ...] = (
    ("", "All Statuses"),
    ("available", "Available"),
    ("watched", "Watched"),
    ("removed", "Removed"),
)


PAGE_TEMPLATE = dedent(
    """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>__APP_NAME__</title>
    <style>
        :root {
            color-scheme: dark;
            font-family: 'Inter', 'Segoe UI', system-ui, -apple-system, sans-serif;
            --surface: #141414;
            --surface-strong: #1f1f1f;
            --text-primary: #f5f5f5;
            --text-muted: #a6a6a6;
            --outline: #2b2b2b;
            --accent: #e50914;
            --success: #2e7d32;
            background: #000000;
            color: var(--text-primary);
        }
        * { box-sizing: border-box; }
        body { margin: 0; background: #000000; }
        main { max-width: 1100px; margin: 0 auto; padding: 2rem 1.5rem 4rem; }
        header { text-align: center; margin-bottom: 2rem; }
        nav { display: flex; gap: 0.5rem; justify-content: center; margin-bottom: 1.5rem; }
        .tab-btn { padding: 0.5rem 1rem; border: 1px solid var(--outline); color: inherit; text-decoration: none; border-radius: 999px; }
        .tab-btn.active { background: var(--surface-strong); }
        .movies-grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(180px, 1fr)); gap: 1rem; }
        .movie-card { background: var(--surface); border: 1px solid var(--outline); border-radius: 12px; overflow: hidden; }
        .movie-poster { cursor: pointer; aspect-ratio: 16 / 9; background: var(--surface-strong); }
        .movie-poster img { width: 100%; height: 100%; object-fit: cover; }
        .movie-info { padding: 0.75rem; }
        .movie-title { margin: 0 0 0.25rem; font-size: 1rem; }
        .movie-year, .movie-meta, .empty-message { color: var(--text-muted); }
        .btn { border: 0; border-radius: 6px; padding: 0.45rem 0.9rem; cursor: pointer; color: #fff; background: var(--surface-strong); }
        .btn-primary { background: var(--accent); }
        .btn-success { background: var(--success); }
        .btn-danger { background: #8b1a1a; }
        .btn-small { font-size: 0.8rem; padding: 0.3rem 0.6rem; }
        .voters { display: flex; flex-wrap: wrap; gap: 1rem; }
        .voter { background: var(--surface); padding: 1rem; border-radius: 12px; min-width: 240px; }
        .rank-input-row { display: flex; justify-content: space-between; gap: 0.5rem; margin-bottom: 0.35rem; }
        .winner-display, .error-banner { margin-top: 1.5rem; padding: 1rem; border-radius: 12px; text-align: center; }
        .winner-display { background: var(--surface-strong); }
        .error-banner { background: #3b0d0d; }
        .winner-title { font-size: 1.5rem; font-weight: 700; }
        .watched-item, .removed-item, .all-movie-item { display: flex; align-items: center; gap: 1rem; padding: 0.6rem 0; border-bottom: 1px solid var(--outline); }
        .movie-name { flex: 1; }
        .movie-status-badge { font-size: 0.75rem; padding: 0.2rem 0.5rem; border-radius: 999px; background: var(--surface-strong); }
        .filters { display: flex; gap: 0.5rem; margin-bottom: 1rem; }
        .modal { position: fixed; inset: 0; background: rgba(0, 0, 0, 0.85); display: flex; align-items: center; justify-content: center; }
        .modal iframe { width: min(90vw, 960px); aspect-ratio: 16 / 9; border: 0; }
        .hidden { display: none; }
    </style>
</head>
<body>
    <main>
        <header>
            <h1>__APP_NAME__</h1>
        </header>
        <nav>__TABS__</nav>
        __CONTENT__
    </main>
    <div id="trailer-modal" class="modal hidden">
        <button class="btn modal-close" type="button">Close</button>
        <div id="trailer-container"></div>
    </div>
    <script>
        (function () {
            const modal = document.getElementById('trailer-modal');
            const container = document.getElementById('trailer-container');

            async function dispatch(action, body) {
                const response = await fetch('/actions/' + action, {
                    method: 'POST',
                    headers: { 'Content-Type': 'application/json' },
                    body: JSON.stringify(body),
                });
                const payload = await response.json();
                if (!response.ok) {
                    throw new Error(payload.error || 'Request failed');
                }
                return payload;
            }

            function openTrailer(youtubeId) {
                container.innerHTML = '<iframe src="__EMBED_PREFIX__' + encodeURIComponent(youtubeId) +
                    '?autoplay=1" allow="autoplay; encrypted-media; picture-in-picture" allowfullscreen></iframe>';
                modal.classList.remove('hidden');
            }

            function reloadWithoutBallots() {
                const current = new URLSearchParams(window.location.search);
                const kept = new URLSearchParams();
                for (const key of ['tab', 'search', 'genre', 'status']) {
                    if (current.has(key)) {
                        kept.set(key, current.get(key));
                    }
                }
                window.location.search = kept.toString();
            }

            function closeTrailer() {
                container.innerHTML = '';
                modal.classList.add('hidden');
            }

            document.addEventListener('click', async (event) => {
                const trailer = event.target.closest('[data-trailer]');
                if (trailer) {
                    openTrailer(trailer.dataset.trailer);
                    return;
                }
                const button = event.target.closest('[data-action]');
                if (!button) {
                    return;
                }
                const movieId = button.dataset.movieId ? parseInt(button.dataset.movieId, 10) : undefined;
                const score = button.dataset.score ? parseInt(button.dataset.score, 10) : null;
                try {
                    await dispatch(button.dataset.action, { movieId: movieId, score: score });
                    reloadWithoutBallots();
                } catch (err) {
                    console.error('Picker action failed:', err);
                }
            });

            document.querySelector('.modal-close').addEventListener('click', closeTrailer);
            modal.addEventListener('click', (event) => {
                if (event.target === modal) {
                    closeTrailer();
                }
            });
            document.addEventListener('keydown', (event) => {
                if (event.key === 'Escape') {
                    closeTrailer();
                }
            });
        })();
    </script>
</body>
</html>
    """
)


def render_tabs(active: str) -> str:
    links = []
    for key, label in TABS:
        css = "tab-btn active" if key == active else "tab-btn"
        links.append(f'<a class="{css}" href="/?tab={key}">{escape(label)}</a>')
    return "".join(links)


def render_movie_card(movie: Movie) -> str:
    """Card used in the current selection grid."""

    title = escape(movie.title)
    poster = ""
    if movie.youtube_id:
        poster = (
            f'<div class="movie-poster" data-trailer="{escape(movie.youtube_id)}">'
            f'<img src="{escape(movie.thumbnail or "")}" alt="{title}" /></div>'
        )
    return (
        f'<div class="movie-card" data-id="{movie.id}">{poster}'
        '<div class="movie-info">'
        f'<h3 class="movie-title">{title}</h3>'
        f'<p class="movie-year">{escape(str(movie.year or ""))} &bull; {escape(movie.genre)}</p>'
        '<div class="movie-actions">'
        f'<button class="btn btn-danger btn-small" type="button" data-action="{PickerEvent.REMOVE.value}" data-movie-id="{movie.id}">'
        "Not Interested</button>"
        "</div></div></div>"
    )


def render_selection(movies: Sequence[Movie]) -> str:
    if not movies:
        return '<p class="empty-message">Click "Get New Movies" to start!</p>'
    cards = "".join(render_movie_card(movie) for movie in movies)
    return f'<div id="movies-grid" class="movies-grid">{cards}</div>'


def render_voting_form(movies: Sequence[Movie], voter_count: int) -> str:
    """One column of rank selects per voter, submitted back to the page."""

    if not movies:
        return ""
    options = "".join(
        f'<option value="{rank}">{rank}</option>' for rank in range(1, len(movies) + 1)
    )
    voters = []
    for voter in range(voter_count):
        rows = "".join(
            '<div class="rank-input-row">'
            f"<span>{escape(movie.title)}</span>"
            f'<select name="voter-{voter}-{movie.id}"><option value="">-</option>{options}</select>'
            "</div>"
            for movie in movies
        )
        voters.append(
            f'<div class="voter"><h4>Voter {voter + 1}</h4><div class="rank-inputs">{rows}</div></div>'
        )
    return (
        '<form id="voting-section" method="get" action="/">'
        '<input type="hidden" name="tab" value="pick" />'
        f'<div class="voters">{"".join(voters)}</div>'
        '<button class="btn btn-primary" type="submit">Calculate Winner</button>'
        "</form>"
    )


def render_winner(result: TallyResult, movies: Sequence[Movie]) -> str:
    winner = next((movie for movie in movies if movie.id == result.winner_id), None)
    if winner is None:
        return ""
    trailer = ""
    if winner.youtube_id:
        trailer = (
            f'<button class="btn btn-primary" type="button" data-trailer="{escape(winner.youtube_id)}">'
            "Watch Trailer</button>"
        )
    return (
        '<div id="winner-display" class="winner-display">'
        "<h3>Tonight's Winner!</h3>"
        f'<div class="winner-title">{escape(winner.title)}</div>'
        f"<p>Score: {result.points} points</p>"
        f"{trailer}"
        f'<button class="btn btn-success" type="button" data-action="{PickerEvent.MARK_WATCHED.value}" '
        f'data-movie-id="{winner.id}" data-score="{result.points}">We Watched It!</button>'
        "</div>"
    )


def render_error(message: str) -> str:
    return f'<div class="error-banner">{escape(message)}</div>'


def render_watched_list(entries: Sequence[WatchedMovie]) -> str:
    if not entries:
        return '<p class="empty-message">No movies watched yet</p>'
    rows = []
    for entry in entries:
        if entry.score is not None:
            score = f'<span class="score">{entry.score} pts</span>'
        else:
            score = '<span class="score" style="opacity: 0.5">No score</span>'
        rows.append(
            '<div class="watched-item">'
            f'<span class="movie-name">{escape(entry.movie.label())}</span>{score}'
            f'<button class="btn btn-small" type="button" data-action="{PickerEvent.UNWATCH.value}" data-movie-id="{entry.movie.id}">'
            "Unmark</button></div>"
        )
    return f'<div id="watched-list">{"".join(rows)}</div>'


def render_removed_list(movies: Sequence[Movie]) -> str:
    if not movies:
        return '<p class="empty-message">No removed movies</p>'
    rows = "".join(
        '<div class="removed-item">'
        f'<span class="movie-name">{escape(movie.label())}</span>'
        f'<button class="btn btn-primary btn-small" type="button" data-action="{PickerEvent.RESTORE.value}" data-movie-id="{movie.id}">'
        "Restore</button></div>"
        for movie in movies
    )
    return f'<div id="removed-list">{rows}</div>'


def render_filters(genres: Sequence[str], *, search: str, genre: str, status: str) -> str:
    genre_options = ['<option value="">All Genres</option>']
    for value in genres:
        selected = " selected" if value == genre else ""
        genre_options.append(
            f'<option value="{escape(value)}"{selected}>{escape(value)}</option>'
        )
    status_options = []
    for value, label in STATUS_FILTERS:
        selected = " selected" if value == status else ""
        status_options.append(f'<option value="{value}"{selected}>{label}</option>')
    return (
        '<form class="filters" method="get" action="/">'
        '<input type="hidden" name="tab" value="all" />'
        f'<input id="search-input" name="search" placeholder="Search titles" value="{escape(search)}" />'
        f'<select id="genre-filter" name="genre">{"".join(genre_options)}</select>'
        f'<select id="status-filter" name="status">{"".join(status_options)}</select>'
        '<button class="btn" type="submit">Filter</button>'
        "</form>"
    )


def render_all_movies(movies: Sequence[Movie], state: PickerState) -> str:
    """Full catalog listing with a status badge and the actions each status allows."""

    if not movies:
        return '<p class="empty-message">No movies match your filters</p>'
    rows = []
    for movie in movies:
        status = state.movie_status(movie.id)
        badge = ""
        if status == "watched":
            score = state.movie_score(movie.id)
            suffix = f" ({score} pts)" if score else ""
            badge = f'<span class="movie-status-badge watched">Watched{suffix}</span>'
        elif status == "removed":
            badge = '<span class="movie-status-badge removed">Removed</span>'

        if status == "available":
            actions = (
                f'<button class="btn btn-small" type="button" data-action="{PickerEvent.MARK_WATCHED_FROM_LIST.value}" data-movie-id="{movie.id}">'
                "Mark Watched</button>"
                f'<button class="btn btn-danger btn-small" type="button" data-action="{PickerEvent.REMOVE.value}" data-movie-id="{movie.id}">'
                "Remove</button>"
            )
        elif status == "watched":
            actions = (
                f'<button class="btn btn-small" type="button" data-action="{PickerEvent.UNWATCH.value}" data-movie-id="{movie.id}">'
                "Unmark</button>"
            )
        else:
            actions = (
                f'<button class="btn btn-primary btn-small" type="button" data-action="{PickerEvent.RESTORE.value}" data-movie-id="{movie.id}">'
                "Restore</button>"
            )

        trailer = ""
        if movie.youtube_id:
            trailer = (
                f'<button class="btn btn-small" type="button" data-trailer="{escape(movie.youtube_id)}">'
                "Trailer</button>"
            )
        rows.append(
            f'<div class="all-movie-item status-{status}">'
            '<div class="movie-details">'
            f'<div class="movie-name">{escape(movie.title)}</div>'
            f'<div class="movie-meta">{escape(str(movie.year or ""))} &bull; {escape(movie.genre)}</div>'
            f"</div>{badge}"
            f'<div class="movie-actions">{trailer}{actions}</div>'
            "</div>"
        )
    return f'<div id="all-movies-list">{"".join(rows)}</div>'


def render_pick_tab(state: PickerState, *, voter_count: int, error: str | None = None) -> str:
    parts = [
        '<section id="tab-pick">',
        f'<button id="new-selection-btn" class="btn btn-primary" type="button" data-action="{PickerEvent.NEW_SELECTION.value}">'
        "Get New Movies</button>",
        render_selection(state.current_selection),
        render_voting_form(state.current_selection, voter_count),
    ]
    if error:
        parts.append(render_error(error))
    if state.winner is not None:
        parts.append(render_winner(state.winner, state.current_selection))
    parts.append("</section>")
    return "".join(parts)


def render_page(
    state: PickerState,
    *,
    app_name: str,
    tab: str = "pick",
    voter_count: int = 2,
    error: str | None = None,
    all_movies: Sequence[Movie] = (),
    genres: Sequence[str] = (),
    search: str = "",
    genre: str = "",
    status: str = "",
) -> str:
    """Return the full HTML for the picker page with ``tab`` active."""

    if tab == "watched":
        content = f'<section id="tab-watched">{render_watched_list(state.sorted_watched())}</section>'
    elif tab == "removed":
        content = f'<section id="tab-removed">{render_removed_list(state.removed)}</section>'
    elif tab == "all":
        content = (
            '<section id="tab-all">'
            f"{render_filters(genres, search=search, genre=genre, status=status)}"
            f"{render_all_movies(all_movies, state)}"
            "</section>"
        )
    else:
        tab = "pick"
        content = render_pick_tab(state, voter_count=voter_count, error=error)

    html = PAGE_TEMPLATE
    replacements = {
        "__APP_NAME__": escape(app_name),
        "__TABS__": render_tabs(tab),
        "__EMBED_PREFIX__": TRAILER_EMBED_PREFIX,
        "__CONTENT__": content,
    }
    for placeholder, value in replacements.items():
        html = html.replace(placeholder, value)
    return html
