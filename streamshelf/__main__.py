"""Module executed when running ``python -m streamshelf``."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

import uvicorn

from app import importer
from app.config import settings

logger = logging.getLogger("streamshelf")


def main(argv: Sequence[str] | None = None) -> int:
    """Start the API server (default) or run the catalog import job."""

    parser = argparse.ArgumentParser(prog="streamshelf")
    parser.add_argument(
        "command",
        nargs="?",
        choices=("serve", "import"),
        default="serve",
        help="'serve' runs the HTTP API, 'import' seeds the catalog from OMDb",
    )
    args, remaining = parser.parse_known_args(argv)

    logging.basicConfig(level=logging.INFO)
    missing = settings.missing_credentials()
    if missing:
        logger.error(
            "%s not set; add it to the environment or .env file.", ", ".join(missing)
        )
        return 1

    if args.command == "import":
        return importer.main(remaining)

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )
    return 0


if __name__ == "__main__":  # pragma: no cover - runtime entrypoint
    sys.exit(main())
