"""Module executed when running ``python -m movienight``."""

from __future__ import annotations

import uvicorn

from picker.config import settings


def main() -> None:
    """Serve the picker API and page with the configured host and port."""

    uvicorn.run(
        "picker.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )


if __name__ == "__main__":  # pragma: no cover - runtime entrypoint
    main()
