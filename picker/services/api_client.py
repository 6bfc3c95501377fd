"""HTTP client for the picker's JSON API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..models import StoreState

logger = logging.getLogger(__name__)


class PickerApiClient:
    """Thin wrapper around the ``/api`` endpoints served by ``picker.main``."""

    def __init__(self, http_client: httpx.AsyncClient):
        self._client = http_client

    async def _send(self, method: str, url: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, url, **kwargs)
        response.raise_for_status()
        return response.json()

    async def get_state(self) -> StoreState:
        payload = await self._send("GET", "/api/state")
        return StoreState.model_validate(payload)

    async def set_selection(self, movie_ids: list[int]) -> None:
        await self._send("POST", "/api/selection", json={"movieIds": movie_ids})

    async def mark_watched(self, movie_id: int, score: int | None) -> None:
        await self._send(
            "POST", "/api/watched", json={"movieId": movie_id, "score": score}
        )

    async def unwatch(self, movie_id: int) -> None:
        await self._send("DELETE", f"/api/watched/{movie_id}")

    async def remove(self, movie_id: int) -> None:
        await self._send("POST", "/api/removed", json={"movieId": movie_id})

    async def restore(self, movie_id: int) -> None:
        await self._send("DELETE", f"/api/removed/{movie_id}")
