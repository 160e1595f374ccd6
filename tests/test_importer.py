"""Tests for the catalog import job."""

from __future__ import annotations

import json
from typing import cast

import httpx
import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import NullPool

from app.config import ConfigurationError
from app.database import Database
from app.import_titles import DEFAULT_IMPORT_TITLES, ImportTitle
from app.importer import CatalogImporter, load_titles, run_import
from app.models import ProviderTitle
from app.services.catalog_store import CatalogRepository
from app.services.omdb import OMDbClient
from helpers import build_settings, omdb_payload


class StubFetcher:
    """Serve canned provider payloads and record each lookup."""

    def __init__(self, payloads: dict[str, dict | Exception | None]):
        self._payloads = payloads
        self.calls: list[str] = []

    async def fetch_title(self, external_id: str) -> ProviderTitle | None:
        self.calls.append(external_id)
        payload = self._payloads.get(external_id)
        if isinstance(payload, Exception):
            raise payload
        if payload is None:
            return None
        return ProviderTitle.model_validate(payload)


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _importer(database: Database, fetcher: StubFetcher, sleep: RecordingSleep | None = None) -> CatalogImporter:
    return CatalogImporter(
        cast(OMDbClient, fetcher),
        CatalogRepository(database.session_factory),
        delay_seconds=0.1,
        sleep=sleep or RecordingSleep(),
    )


@pytest.mark.anyio
async def test_second_run_is_a_no_op(database) -> None:
    """Importing the same list twice leaves exactly one record per id."""

    fetcher = StubFetcher({"ttAAA": omdb_payload("ttAAA", "Alpha")})
    titles = [ImportTitle("ttAAA", "movie")]
    repository = CatalogRepository(database.session_factory)

    first = await _importer(database, fetcher).run(titles)
    second = await _importer(database, fetcher).run(titles)

    assert first.imported == ["ttAAA"]
    assert second.imported == []
    assert second.skipped_existing == ["ttAAA"]
    assert await repository.count("movie", "ttAAA") == 1
    assert await repository.count("series") == 0


@pytest.mark.anyio
async def test_kind_comes_from_provider_and_flag_from_title(database) -> None:
    fetcher = StubFetcher({"tt0903747": omdb_payload("tt0903747", "Breaking Bad", kind="series")})
    repository = CatalogRepository(database.session_factory)

    summary = await _importer(database, fetcher).run(
        [ImportTitle("tt0903747", "movie", is_featured=True, title="Breaking Bad")]
    )

    assert summary.imported == ["tt0903747"]
    assert await repository.get("movie", "tt0903747") is None
    stored = await repository.get("series", "tt0903747")
    assert stored is not None
    assert stored.is_featured is True
    assert stored.total_seasons == "5"


@pytest.mark.anyio
async def test_bad_items_are_skipped_and_the_run_continues(database) -> None:
    fetcher = StubFetcher(
        {
            "tt-episode": omdb_payload("tt-episode", "Pilot", kind="episode"),
            "tt-missing": None,
            "tt-broken": RuntimeError("boom"),
            "tt-good": omdb_payload("tt-good", "Good Film"),
        }
    )
    sleep = RecordingSleep()
    titles = [
        ImportTitle("tt-episode", "series"),
        ImportTitle("tt-missing", "movie"),
        ImportTitle("tt-broken", "movie"),
        ImportTitle("tt-good", "movie"),
    ]

    summary = await _importer(database, fetcher, sleep).run(titles)

    assert fetcher.calls == ["tt-episode", "tt-missing", "tt-broken", "tt-good"]
    assert summary.skipped_unsupported == ["tt-episode"]
    assert summary.not_found == ["tt-missing"]
    assert summary.failed == ["tt-broken"]
    assert summary.imported == ["tt-good"]
    assert summary.processed == 4
    assert sleep.delays == [0.1, 0.1, 0.1]


@pytest.mark.anyio
async def test_run_import_end_to_end(tmp_path) -> None:
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'import.db'}"
    settings = build_settings(DATABASE_URL=database_url)

    def handler(request: httpx.Request) -> httpx.Response:
        external_id = request.url.params["i"]
        if external_id == "tt0944947":
            return httpx.Response(200, json=omdb_payload(external_id, "Game of Thrones", kind="series"))
        return httpx.Response(200, json=omdb_payload(external_id, "The Matrix"))

    titles = [ImportTitle("tt0133093", "movie"), ImportTitle("tt0944947", "series")]
    transport = httpx.MockTransport(handler)

    first = await run_import(settings, titles, transport=transport)
    second = await run_import(settings, titles, transport=transport)

    assert sorted(first.imported) == ["tt0133093", "tt0944947"]
    assert sorted(second.skipped_existing) == ["tt0133093", "tt0944947"]

    database = Database(database_url, poolclass=NullPool)
    repository = CatalogRepository(database.session_factory)
    assert await repository.count("movie") == 1
    assert await repository.count("series") == 1
    await database.dispose()


@pytest.mark.anyio
async def test_run_import_requires_credentials() -> None:
    settings = build_settings(OMDB_API_KEY=None)

    with pytest.raises(ConfigurationError, match="OMDB_API_KEY"):
        await run_import(settings, [ImportTitle("tt01", "movie")])


def test_load_titles_reads_json_list(tmp_path) -> None:
    path = tmp_path / "titles.json"
    path.write_text(
        json.dumps(
            [
                {"externalId": "tt0111161", "kind": "movie", "title": "Shawshank"},
                {"imdbID": "tt4574334", "type": "series", "isFeatured": True},
            ]
        ),
        encoding="utf-8",
    )

    titles = load_titles(path)

    assert titles == (
        ImportTitle("tt0111161", "movie", False, "Shawshank"),
        ImportTitle("tt4574334", "series", True, None),
    )


def test_load_titles_rejects_entries_without_kind(tmp_path) -> None:
    path = tmp_path / "titles.json"
    path.write_text(json.dumps([{"externalId": "tt01"}]), encoding="utf-8")

    with pytest.raises(ValueError, match="kind"):
        load_titles(path)


def test_default_titles_have_unique_ids() -> None:
    ids = [title.external_id for title in DEFAULT_IMPORT_TITLES]

    assert len(ids) == len(set(ids))
    assert {title.kind for title in DEFAULT_IMPORT_TITLES} == {"movie", "series"}


@pytest.mark.anyio
async def test_run_import_fails_fast_when_store_unreachable(tmp_path) -> None:
    settings = build_settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'import.db'}"
    )
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=omdb_payload("tt01", "Never fetched"))

    with pytest.raises(OperationalError):
        await run_import(
            settings, [ImportTitle("tt01", "movie")], transport=httpx.MockTransport(handler)
        )

    assert requests == []
