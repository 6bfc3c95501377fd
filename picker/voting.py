"""Borda count tally over the current selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

Ballot = Mapping[int, int | None]


class InvalidBallotError(ValueError):
    """Raised when any ballot fails validation; the tally is discarded."""

    def __init__(self, message: str, *, voter_index: int | None = None):
        super().__init__(message)
        self.voter_index = voter_index


@dataclass(slots=True)
class TallyResult:
    """Winning movie plus the points table in selection order."""

    winner_id: int
    points: int
    totals: dict[int, int]

    def to_payload(self) -> dict[str, object]:
        return {
            "winner": self.winner_id,
            "points": self.points,
            "totals": [
                {"movieId": movie_id, "points": value}
                for movie_id, value in self.totals.items()
            ],
        }


def validate_ballot(ballot: Ballot, movie_ids: Sequence[int]) -> None:
    """Check that a ballot ranks every movie exactly once with ``1..M``."""

    size = len(movie_ids)
    used: set[int] = set()
    for movie_id in movie_ids:
        rank = ballot.get(movie_id)
        if rank is None:
            raise InvalidBallotError(f"Movie {movie_id} has no rank")
        if not 1 <= rank <= size:
            raise InvalidBallotError(f"Rank {rank} is outside 1-{size}")
        if rank in used:
            raise InvalidBallotError(f"Rank {rank} is used more than once")
        used.add(rank)


def tally_votes(movie_ids: Sequence[int], ballots: Sequence[Ballot]) -> TallyResult:
    """Sum ``M - rank + 1`` points per movie and return the highest total.

    Every ballot is validated before any points are counted, so a single bad
    ballot rejects the whole vote. Ties go to the movie listed first.
    """

    if not movie_ids:
        raise InvalidBallotError("There are no movies to vote on")
    if not ballots:
        raise InvalidBallotError("At least one ballot is required")

    for voter_index, ballot in enumerate(ballots):
        try:
            validate_ballot(ballot, movie_ids)
        except InvalidBallotError as exc:
            raise InvalidBallotError(
                f"Voter {voter_index + 1}: {exc}", voter_index=voter_index
            ) from exc

    size = len(movie_ids)
    totals = {movie_id: 0 for movie_id in movie_ids}
    for ballot in ballots:
        for movie_id in movie_ids:
            totals[movie_id] += size - ballot[movie_id] + 1  # type: ignore[operator]

    winner_id = movie_ids[0]
    for movie_id in movie_ids:
        if totals[movie_id] > totals[winner_id]:
            winner_id = movie_id
    return TallyResult(winner_id=winner_id, points=totals[winner_id], totals=totals)

