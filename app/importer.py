"""Batch job that seeds the catalog from the OMDb provider."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, Iterable, Literal, Sequence, cast

import httpx

from .config import ConfigurationError, Settings, get_settings
from .database import Database
from .import_titles import DEFAULT_IMPORT_TITLES, ImportTitle
from .models import CONTENT_TYPES, UnsupportedKindError
from .services.catalog_store import CatalogRepository
from .services.omdb import OMDbClient

logger = logging.getLogger(__name__)

ImportOutcome = Literal["imported", "exists", "unsupported", "not_found", "failed"]


@dataclass
class ImportSummary:
    """Per-outcome tally of a single import run."""

    imported: list[str] = field(default_factory=list)
    skipped_existing: list[str] = field(default_factory=list)
    skipped_unsupported: list[str] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    def record(self, external_id: str, outcome: ImportOutcome) -> None:
        bucket = {
            "imported": self.imported,
            "exists": self.skipped_existing,
            "unsupported": self.skipped_unsupported,
            "not_found": self.not_found,
            "failed": self.failed,
        }[outcome]
        bucket.append(external_id)

    @property
    def processed(self) -> int:
        return (
            len(self.imported)
            + len(self.skipped_existing)
            + len(self.skipped_unsupported)
            + len(self.not_found)
            + len(self.failed)
        )


class CatalogImporter:
    """Fetch configured titles one at a time and insert the ones not yet stored."""

    def __init__(
        self,
        fetcher: OMDbClient,
        repository: CatalogRepository,
        *,
        delay_seconds: float = 0.1,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._fetcher = fetcher
        self._repository = repository
        self._delay_seconds = delay_seconds
        self._sleep = sleep

    async def run(self, titles: Sequence[ImportTitle]) -> ImportSummary:
        """Import ``titles`` sequentially, pausing between provider calls."""

        summary = ImportSummary()
        for index, title in enumerate(titles):
            logger.info(
                "Processing %s (%s) - external id %s",
                title.label,
                title.kind,
                title.external_id,
            )
            try:
                outcome = await self.import_title(title)
            except Exception:
                logger.exception("Error importing %s", title.external_id)
                outcome = "failed"
            summary.record(title.external_id, outcome)

            if index < len(titles) - 1 and self._delay_seconds > 0:
                await self._sleep(self._delay_seconds)

        logger.info(
            "Import finished: %d processed, %d imported, %d already present, "
            "%d unsupported, %d not found, %d failed",
            summary.processed,
            len(summary.imported),
            len(summary.skipped_existing),
            len(summary.skipped_unsupported),
            len(summary.not_found),
            len(summary.failed),
        )
        return summary

    async def import_title(self, title: ImportTitle) -> ImportOutcome:
        provider_title = await self._fetcher.fetch_title(title.external_id)
        if provider_title is None:
            logger.warning(
                "Failed to get valid provider data for %s. Skipping.", title.external_id
            )
            return "not_found"

        try:
            entry = provider_title.to_entry(is_featured=title.is_featured)
        except UnsupportedKindError as exc:
            logger.warning("Skipping %s: %s", title.external_id, exc)
            return "unsupported"

        if entry.kind != title.kind:
            logger.info(
                "Provider lists %s as %s rather than %s",
                entry.external_id,
                entry.kind,
                title.kind,
            )

        inserted = await self._repository.insert_if_absent(entry)
        if not inserted:
            logger.info(
                "Skipping: %s (%s) already exists.", entry.title, entry.external_id
            )
            return "exists"

        logger.info("Successfully imported: %s (%s)", entry.title, entry.external_id)
        return "imported"


def load_titles(path: Path) -> tuple[ImportTitle, ...]:
    """Read an import list from a JSON array of title objects."""

    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a JSON array of titles")

    titles: list[ImportTitle] = []
    for position, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ValueError(f"Entry {position} in {path} is not an object")
        external_id = str(entry.get("externalId") or entry.get("imdbID") or "").strip()
        kind = str(entry.get("kind") or entry.get("type") or "").strip().lower()
        if not external_id or kind not in CONTENT_TYPES:
            raise ValueError(
                f"Entry {position} in {path} needs an externalId and a kind of "
                "'movie' or 'series'"
            )
        titles.append(
            ImportTitle(
                external_id=external_id,
                kind=kind,  # type: ignore[arg-type]
                is_featured=bool(entry.get("isFeatured", False)),
                title=entry.get("title"),
            )
        )
    return tuple(titles)


async def run_import(
    settings: Settings,
    titles: Iterable[ImportTitle] = DEFAULT_IMPORT_TITLES,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ImportSummary:
    """Connect to the store and provider, run the import and always disconnect.

    Missing credentials raise :class:`ConfigurationError`; a store that cannot
    be reached raises before any title is processed.
    """

    settings.require_credentials()

    database = Database(cast(str, settings.database_url))
    try:
        await database.connect()
        logger.info("Database connected for data import.")
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(15.0, connect=5.0), transport=transport
        ) as http_client:
            importer = CatalogImporter(
                OMDbClient(settings, http_client),
                CatalogRepository(database.session_factory),
                delay_seconds=settings.import_delay_seconds,
            )
            return await importer.run(tuple(titles))
    finally:
        await database.dispose()
        logger.info("Database disconnected.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Import curated films and series from OMDb into the catalog."
    )
    parser.add_argument(
        "--titles",
        type=Path,
        default=None,
        help="JSON file with [{externalId, kind, isFeatured, title}] entries",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the import job, returning a process exit status."""

    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)
    settings = get_settings()
    try:
        titles = load_titles(args.titles) if args.titles else DEFAULT_IMPORT_TITLES
    except (OSError, ValueError) as exc:
        logger.error("Could not load import titles: %s", exc)
        return 1

    try:
        asyncio.run(run_import(settings, titles))
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 1
    except Exception:
        logger.exception("Catalog import aborted")
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - runtime entrypoint
    raise SystemExit(main())
