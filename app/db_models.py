"""SQLAlchemy ORM models backing the persistent state."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class CatalogColumns:
    """Columns shared by the film and series collections."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    title: Mapped[str] = mapped_column(String(255))
    year: Mapped[str | None] = mapped_column(String(32), nullable=True)
    rated: Mapped[str | None] = mapped_column(String(32), nullable=True)
    released: Mapped[str | None] = mapped_column(String(64), nullable=True)
    runtime: Mapped[str | None] = mapped_column(String(64), nullable=True)
    genre: Mapped[str | None] = mapped_column(String(255), nullable=True)
    director: Mapped[str | None] = mapped_column(Text, nullable=True)
    writer: Mapped[str | None] = mapped_column(Text, nullable=True)
    actors: Mapped[str | None] = mapped_column(Text, nullable=True)
    plot: Mapped[str | None] = mapped_column(Text, nullable=True)
    language: Mapped[str | None] = mapped_column(String(255), nullable=True)
    country: Mapped[str | None] = mapped_column(String(255), nullable=True)
    awards: Mapped[str | None] = mapped_column(Text, nullable=True)
    poster: Mapped[str | None] = mapped_column(String(512), nullable=True)
    metascore: Mapped[str | None] = mapped_column(String(16), nullable=True)
    imdb_rating: Mapped[str | None] = mapped_column(String(16), nullable=True)
    imdb_votes: Mapped[str | None] = mapped_column(String(32), nullable=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    imported_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, index=True
    )


class Film(CatalogColumns, Base):
    """A movie imported from the metadata provider."""

    __tablename__ = "films"

    kind: Mapped[str] = mapped_column(String(16), default="movie")


class Series(CatalogColumns, Base):
    """A series imported from the metadata provider."""

    __tablename__ = "series"

    kind: Mapped[str] = mapped_column(String(16), default="series")
    total_seasons: Mapped[str | None] = mapped_column(String(16), nullable=True)


class WatchList(Base):
    """A user's "my list" document with its embedded item summaries."""

    __tablename__ = "watchlists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(128), unique=True, index=True)
    items: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


CATALOG_MODELS: dict[str, type[Film] | type[Series]] = {
    "movie": Film,
    "series": Series,
}
