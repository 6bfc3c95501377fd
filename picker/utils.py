"""Utility helpers for the movie night picker."""

from __future__ import annotations

from typing import Iterable


THUMBNAIL_URL = "https://img.youtube.com/vi/{youtube_id}/mqdefault.jpg"
TRAILER_EMBED_PREFIX = "https://www.youtube.com/embed/"


def thumbnail_url(youtube_id: str) -> str:
    """Return the medium-quality YouTube thumbnail for a trailer."""

    return THUMBNAIL_URL.format(youtube_id=youtube_id)


def dedupe_ids(values: Iterable[int]) -> list[int]:
    """Drop repeated identifiers while keeping the first occurrence order."""

    seen: set[int] = set()
    unique: list[int] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        unique.append(value)
    return unique
