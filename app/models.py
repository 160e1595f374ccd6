"""Pydantic models describing catalog and watch-list payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ContentType = Literal["movie", "series"]
CONTENT_TYPES: tuple[ContentType, ...] = ("movie", "series")

MISSING_VALUE = "N/A"


def split_genres(value: str | None) -> list[str]:
    """Split a comma-joined genre string, dropping blanks and the unknown sentinel."""

    if not value:
        return []
    tokens = [part.strip() for part in value.split(",")]
    return [token for token in tokens if token and token != MISSING_VALUE]


class UnsupportedKindError(ValueError):
    """Raised when the provider describes something other than a film or series."""

    def __init__(self, external_id: str, kind: str | None):
        super().__init__(
            f"Unsupported provider type {kind!r} for {external_id}; "
            "expected 'movie' or 'series'"
        )
        self.external_id = external_id
        self.kind = kind


class CatalogEntry(BaseModel):
    """A normalized film or series record as stored and served."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    external_id: str
    title: str
    kind: ContentType
    year: str | None = None
    rated: str | None = None
    released: str | None = None
    runtime: str | None = None
    genre: str | None = None
    director: str | None = None
    writer: str | None = None
    actors: str | None = None
    plot: str | None = None
    language: str | None = None
    country: str | None = None
    awards: str | None = None
    poster: str | None = None
    metascore: str | None = None
    imdb_rating: str | None = None
    imdb_votes: str | None = None
    total_seasons: str | None = None
    is_featured: bool = False
    imported_at: datetime | None = None

    def genre_tokens(self) -> list[str]:
        """Return the individual genres from the comma-joined ``genre`` field."""

        return split_genres(self.genre)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON representation served to the browser client."""

        payload = self.model_dump(by_alias=True, mode="json")
        if self.kind != "series":
            payload.pop("totalSeasons", None)
        return payload


class ProviderTitle(BaseModel):
    """Full-detail title payload returned by the OMDb provider.

    Field names mirror the provider's capitalised keys. Every descriptive value
    is kept verbatim, including the provider's ``"N/A"`` sentinel.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    external_id: str = Field(alias="imdbID")
    title: str = Field(alias="Title")
    type: str | None = Field(default=None, alias="Type")
    year: str | None = Field(default=None, alias="Year")
    rated: str | None = Field(default=None, alias="Rated")
    released: str | None = Field(default=None, alias="Released")
    runtime: str | None = Field(default=None, alias="Runtime")
    genre: str | None = Field(default=None, alias="Genre")
    director: str | None = Field(default=None, alias="Director")
    writer: str | None = Field(default=None, alias="Writer")
    actors: str | None = Field(default=None, alias="Actors")
    plot: str | None = Field(default=None, alias="Plot")
    language: str | None = Field(default=None, alias="Language")
    country: str | None = Field(default=None, alias="Country")
    awards: str | None = Field(default=None, alias="Awards")
    poster: str | None = Field(default=None, alias="Poster")
    metascore: str | None = Field(default=None, alias="Metascore")
    imdb_rating: str | None = Field(default=None, alias="imdbRating")
    imdb_votes: str | None = Field(default=None, alias="imdbVotes")
    total_seasons: str | None = Field(default=None, alias="totalSeasons")

    @property
    def kind(self) -> str | None:
        return (self.type or "").strip().lower() or None

    def to_entry(self, *, is_featured: bool = False) -> CatalogEntry:
        """Convert the provider payload into a catalog record.

        The kind comes from the provider's own ``Type`` field. Anything other
        than a movie or series raises :class:`UnsupportedKindError`.
        """

        kind = self.kind
        if kind not in CONTENT_TYPES:
            raise UnsupportedKindError(self.external_id, self.type)

        data = self.model_dump(exclude={"type"})
        if kind != "series":
            data["total_seasons"] = None
        return CatalogEntry(kind=kind, is_featured=is_featured, **data)


class WatchListItem(BaseModel):
    """Denormalized summary of a catalog title stored in a user's list."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    external_id: str
    kind: ContentType = Field(validation_alias=AliasChoices("kind", "type", "Type"))
    title: str = Field(min_length=1, validation_alias=AliasChoices("title", "Title"))
    poster: str | None = Field(
        default=None, validation_alias=AliasChoices("poster", "posterUrl", "Poster")
    )
    year: str | None = None
    plot: str | None = None
    genre: str | None = None
    director: str | None = None
    actors: str | None = Field(
        default=None, validation_alias=AliasChoices("actors", "cast", "Actors")
    )
    imdb_rating: str | None = Field(
        default=None,
        validation_alias=AliasChoices("imdbRating", "audienceRating", "imdb_rating"),
        serialization_alias="imdbRating",
    )

    def to_document(self) -> dict[str, Any]:
        """Return the JSON document persisted inside the list."""

        return self.model_dump(by_alias=True, mode="json")


class Genre(BaseModel):
    """A distinct genre token exposed by the catalog."""

    id: int
    name: str
