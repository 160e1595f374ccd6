"""Merge live provider detail with locally stored catalog overrides."""

from __future__ import annotations

from typing import Any

from ..models import MISSING_VALUE, CatalogEntry, ProviderTitle, UnsupportedKindError


def _supplied(value: str | None) -> bool:
    return bool(value and value.strip() and value.strip() != MISSING_VALUE)


def merge_detail(
    provider: ProviderTitle | None, local: CatalogEntry | None
) -> dict[str, Any] | None:
    """Return the enriched detail payload, or ``None`` when neither side knows the title.

    Provider data is the base record. A local record overrides ``plot`` and
    ``director`` when it holds a real value and always supplies ``isFeatured``.
    Without usable provider data (unknown title, or a kind other than movie
    or series) the local record is returned as stored.
    """

    entry: CatalogEntry | None = None
    if provider is not None:
        try:
            entry = provider.to_entry()
        except UnsupportedKindError:
            entry = None
    if entry is None:
        return local.to_payload() if local is not None else None

    if local is None:
        return entry.to_payload()

    overrides: dict[str, Any] = {
        "is_featured": local.is_featured,
        "imported_at": local.imported_at,
    }
    if _supplied(local.plot):
        overrides["plot"] = local.plot
    if _supplied(local.director):
        overrides["director"] = local.director
    return entry.model_copy(update=overrides).to_payload()
