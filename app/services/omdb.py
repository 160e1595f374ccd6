"""Client for the OMDb metadata provider."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..models import ProviderTitle

logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """Raised when the provider cannot be reached or returns an unusable body."""


class OMDbClient:
    """Fetch full-detail title metadata keyed by IMDb identifier."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        if not settings.omdb_api_key:
            raise ValueError("OMDb API key is required when initialising OMDbClient")
        self._settings = settings
        self._client = http_client

    async def fetch_title(self, external_id: str) -> ProviderTitle | None:
        """Return the normalized provider record for ``external_id``.

        ``None`` covers both provider-reported not-found and transport/HTTP
        failures; each case is logged as a warning. No retry is attempted.
        """

        try:
            return await self.fetch_detail(external_id)
        except ProviderError as exc:
            logger.warning("OMDb lookup failed for %s: %s", external_id, exc)
            return None

    async def fetch_detail(self, external_id: str) -> ProviderTitle | None:
        """Return the provider record, or ``None`` when the title is unknown.

        Raises :class:`ProviderError` on transport, HTTP or payload failures.
        """

        payload = await self._get({"i": external_id, "plot": "full"})
        if not self._is_found(payload):
            logger.warning(
                "OMDb has no record for %s: %s",
                external_id,
                payload.get("Error") or "Unknown error",
            )
            return None

        try:
            return ProviderTitle.model_validate(payload)
        except ValidationError as exc:
            raise ProviderError(
                f"OMDb returned an unexpected payload for {external_id}"
            ) from exc

    async def fetch_season(
        self, external_id: str, season: int
    ) -> list[dict[str, Any]] | None:
        """Return the episode list for one season of a series."""

        payload = await self._get({"i": external_id, "Season": season})
        if not self._is_found(payload):
            logger.info(
                "OMDb has no season %s for %s: %s",
                season,
                external_id,
                payload.get("Error") or "Unknown error",
            )
            return None
        episodes = payload.get("Episodes") or []
        return [episode for episode in episodes if isinstance(episode, dict)]

    async def _get(self, params: dict[str, Any]) -> dict[str, Any]:
        query = {**params, "apikey": self._settings.omdb_api_key}
        try:
            response = await self._client.get(
                str(self._settings.omdb_api_url), params=query
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                f"OMDb responded with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"Failed to fetch data from OMDb: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError("OMDb returned a non-JSON response") from exc
        if not isinstance(payload, dict):
            raise ProviderError("OMDb returned an unexpected response shape")
        return payload

    @staticmethod
    def _is_found(payload: dict[str, Any]) -> bool:
        return str(payload.get("Response", "")).lower() == "true"
