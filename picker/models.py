"""Pydantic models describing movies and API payloads."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .utils import dedupe_ids, thumbnail_url


class Movie(BaseModel):
    """A read-only catalog entry."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    title: str
    year: int | None = None
    genre: str = ""
    youtube_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("youtube_id", "youtubeId", "trailer"),
        serialization_alias="youtubeId",
    )

    @property
    def thumbnail(self) -> str | None:
        if not self.youtube_id:
            return None
        return thumbnail_url(self.youtube_id)

    def label(self) -> str:
        """Return ``Title (Year)`` or just the title when the year is unknown."""

        if self.year:
            return f"{self.title} ({self.year})"
        return self.title


class WatchedEntry(BaseModel):
    """Wire representation of a watched record."""

    model_config = ConfigDict(populate_by_name=True)

    movie_id: int = Field(alias="movieId")
    score: int | None = None


class StoreState(BaseModel):
    """Snapshot of the three store tables as returned by ``GET /api/state``."""

    model_config = ConfigDict(populate_by_name=True)

    watched: list[WatchedEntry] = Field(default_factory=list)
    removed: list[int] = Field(default_factory=list)
    current_selection: list[int] = Field(
        default_factory=list, alias="currentSelection"
    )

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


class SelectionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    movie_ids: list[int] = Field(alias="movieIds")

    @field_validator("movie_ids")
    @classmethod
    def _collapse_duplicates(cls, value: list[int]) -> list[int]:
        return dedupe_ids(value)


class WatchedRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    movie_id: int = Field(alias="movieId")
    score: int | None = Field(default=None, ge=0)


class RemovedRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    movie_id: int = Field(alias="movieId")


class DrawRequest(BaseModel):
    """Optional override for the number of movies drawn server-side."""

    count: int | None = Field(default=None, ge=1, le=50)


class TallyRequest(BaseModel):
    """Ranked ballots keyed by movie id, one mapping per voter."""

    ballots: list[dict[int, int | None]]


class ActionRequest(BaseModel):
    """Arguments for a picker event posted by the page."""

    model_config = ConfigDict(populate_by_name=True)

    movie_id: int | None = Field(default=None, alias="movieId")
    score: int | None = Field(default=None, ge=0)
    ballots: list[dict[int, int | None]] = Field(default_factory=list)
