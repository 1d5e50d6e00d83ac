"""
vidshare - main entry point.

    uvicorn vidshare.main:app --reload

or simply `python -m vidshare.main`.
"""

from __future__ import annotations

import logging

import uvicorn

from vidshare.api.app import create_app
from vidshare.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app(settings)


def main():
    """Main entry point."""
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
