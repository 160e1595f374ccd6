"""Persistence for imported film and series records."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..db_models import CATALOG_MODELS, Film, Series
from ..models import CONTENT_TYPES, CatalogEntry, ContentType, Genre, split_genres

logger = logging.getLogger(__name__)


class CatalogRepository:
    """Read and insert-if-absent access to the two catalog collections."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, kind: ContentType, external_id: str) -> CatalogEntry | None:
        model = CATALOG_MODELS[kind]
        async with self._session_factory() as session:
            stmt = select(model).where(model.external_id == external_id)
            result = await session.execute(stmt)
            record = result.scalars().first()
        if record is None:
            return None
        return CatalogEntry.model_validate(record)

    async def insert_if_absent(self, entry: CatalogEntry) -> bool:
        """Persist ``entry`` unless its external id is already stored.

        Returns ``True`` when a new record was written. Existing records are
        never modified.
        """

        model = CATALOG_MODELS[entry.kind]
        async with self._session_factory() as session:
            stmt = select(model.id).where(model.external_id == entry.external_id)
            result = await session.execute(stmt)
            if result.scalar_one_or_none() is not None:
                return False

            exclude = {"imported_at"}
            if model is Film:
                exclude.add("total_seasons")
            record = model(**entry.model_dump(exclude=exclude))
            if entry.imported_at is not None:
                record.imported_at = entry.imported_at
            session.add(record)
            try:
                await session.commit()
            except IntegrityError:
                # Another writer inserted the same id between the check and commit.
                await session.rollback()
                logger.info(
                    "Concurrent insert detected for %s %s", entry.kind, entry.external_id
                )
                return False
        return True

    async def list_by_kind(
        self, kind: ContentType, *, limit: int | None = None
    ) -> list[CatalogEntry]:
        """Return records of ``kind`` ordered newest first."""

        model = CATALOG_MODELS[kind]
        stmt = select(model).order_by(model.imported_at.desc(), model.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            records = result.scalars().all()
        return [CatalogEntry.model_validate(record) for record in records]

    async def recent(self, kind: ContentType, limit: int = 5) -> list[CatalogEntry]:
        return await self.list_by_kind(kind, limit=limit)

    async def find_detail(self, external_id: str) -> CatalogEntry | None:
        """Look up ``external_id`` among films first, then series."""

        for kind in CONTENT_TYPES:
            entry = await self.get(kind, external_id)
            if entry is not None:
                return entry
        return None

    async def genres(self) -> list[Genre]:
        """Return the distinct genre tokens across films and series."""

        names: list[str] = []
        seen: set[str] = set()
        async with self._session_factory() as session:
            for model in (Film, Series):
                stmt = select(model.genre).order_by(model.id)
                result = await session.execute(stmt)
                for raw in result.scalars():
                    for name in split_genres(raw):
                        key = name.casefold()
                        if key in seen:
                            continue
                        seen.add(key)
                        names.append(name)
        return [Genre(id=index, name=name) for index, name in enumerate(names, start=1)]

    async def count(self, kind: ContentType, external_id: str | None = None) -> int:
        model = CATALOG_MODELS[kind]
        stmt = select(func.count()).select_from(model)
        if external_id is not None:
            stmt = stmt.where(model.external_id == external_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())
