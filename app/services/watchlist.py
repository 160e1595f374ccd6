"""Per-user "my list" storage."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..db_models import WatchList
from ..models import WatchListItem

logger = logging.getLogger(__name__)


class DuplicateItemError(LookupError):
    """Raised when adding an item that is already present in the list."""


class ItemNotFoundError(LookupError):
    """Raised when removing an item that is not present in the list."""


class WatchListService:
    """Get-or-create, add and remove operations on one list per user.

    Every mutation loads the list, computes the new item sequence and writes
    it back in a single transaction. Concurrent writers for the same user are
    last-write-wins.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_items(self, user_id: str) -> list[dict[str, Any]]:
        """Return the user's items, creating an empty list on first access."""

        async with self._session_factory() as session:
            watchlist = await self._load(session, user_id)
            if watchlist is None:
                watchlist = await self._create(session, user_id)
            return list(watchlist.items or [])

    async def add_item(self, user_id: str, item: WatchListItem) -> list[dict[str, Any]]:
        """Append ``item`` and return the updated items."""

        async with self._session_factory() as session:
            watchlist = await self._load(session, user_id)
            if watchlist is None:
                watchlist = WatchList(user_id=user_id, items=[])
                session.add(watchlist)

            items = list(watchlist.items or [])
            if any(entry.get("externalId") == item.external_id for entry in items):
                raise DuplicateItemError(
                    f"{item.external_id} is already in the list for {user_id}"
                )

            # Assign a fresh list so the JSON column is flagged dirty.
            watchlist.items = [*items, item.to_document()]
            await session.commit()
            logger.info("Added %s to list for %s", item.external_id, user_id)
            return list(watchlist.items)

    async def remove_item(self, user_id: str, external_id: str) -> list[dict[str, Any]]:
        """Remove the item with ``external_id`` and return the remaining items."""

        async with self._session_factory() as session:
            watchlist = await self._load(session, user_id)
            if watchlist is None:
                raise ItemNotFoundError(f"No list exists for {user_id}")

            items = list(watchlist.items or [])
            remaining = [entry for entry in items if entry.get("externalId") != external_id]
            if len(remaining) == len(items):
                raise ItemNotFoundError(
                    f"{external_id} is not in the list for {user_id}"
                )

            watchlist.items = remaining
            await session.commit()
            logger.info("Removed %s from list for %s", external_id, user_id)
            return list(watchlist.items)

    @staticmethod
    async def _load(session: AsyncSession, user_id: str) -> WatchList | None:
        stmt = select(WatchList).where(WatchList.user_id == user_id)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def _create(self, session: AsyncSession, user_id: str) -> WatchList:
        watchlist = WatchList(user_id=user_id, items=[])
        session.add(watchlist)
        try:
            await session.commit()
        except IntegrityError:
            # A concurrent request created the list first; use theirs.
            await session.rollback()
            existing = await self._load(session, user_id)
            if existing is None:
                raise
            return existing
        return watchlist
