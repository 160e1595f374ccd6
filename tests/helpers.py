"""Shared builders for settings and provider payloads used across tests."""

from __future__ import annotations

from typing import Any

from app.config import Settings


def build_settings(**overrides: Any) -> Settings:
    """Return a settings object with defaults suitable for tests."""

    base: dict[str, Any] = {
        "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
        "OMDB_API_KEY": "test-key",
        "OMDB_API_URL": "https://omdb.example.com/",
        "IMPORT_DELAY_SECONDS": 0,
    }
    base.update(overrides)
    return Settings(_env_file=None, **base)  # type: ignore[arg-type]


def omdb_payload(external_id: str, title: str, kind: str = "movie", **fields: Any) -> dict[str, Any]:
    """Build a successful OMDb full-detail response body."""

    payload: dict[str, Any] = {
        "imdbID": external_id,
        "Title": title,
        "Type": kind,
        "Year": "1999",
        "Rated": "R",
        "Released": "31 Mar 1999",
        "Runtime": "136 min",
        "Genre": "Action, Sci-Fi",
        "Director": "Lana Wachowski, Lilly Wachowski",
        "Writer": "Lilly Wachowski, Lana Wachowski",
        "Actors": "Keanu Reeves, Laurence Fishburne, Carrie-Anne Moss",
        "Plot": "A computer hacker learns the true nature of reality.",
        "Language": "English",
        "Country": "United States, Australia",
        "Awards": "Won 4 Oscars",
        "Poster": "https://example.com/poster.jpg",
        "Metascore": "73",
        "imdbRating": "8.7",
        "imdbVotes": "2,000,000",
        "Response": "True",
    }
    if kind == "series":
        payload["totalSeasons"] = "5"
    payload.update(fields)
    return payload
