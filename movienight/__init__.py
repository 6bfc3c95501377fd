"""Shim exposing the picker FastAPI app under the distribution name."""

from __future__ import annotations

from picker.main import app, create_app

__all__ = ["app", "create_app"]
