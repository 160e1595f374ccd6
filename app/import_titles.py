"""Curated titles seeded into the catalog by the import job."""

from __future__ import annotations

from dataclasses import dataclass

from .models import ContentType


@dataclass(frozen=True)
class ImportTitle:
    """One configured title to fetch from the provider.

    ``kind`` documents the expected collection only; the stored kind always
    comes from the provider's response.
    """

    external_id: str
    kind: ContentType
    is_featured: bool = False
    title: str | None = None

    @property
    def label(self) -> str:
        return self.title or self.external_id


def _movie(external_id: str, title: str, *, featured: bool = False) -> ImportTitle:
    return ImportTitle(external_id, "movie", featured, title)


def _series(external_id: str, title: str, *, featured: bool = False) -> ImportTitle:
    return ImportTitle(external_id, "series", featured, title)


DEFAULT_IMPORT_TITLES: tuple[ImportTitle, ...] = (
    _movie("tt0111161", "The Shawshank Redemption"),
    _movie("tt0068646", "The Godfather"),
    _movie("tt0468569", "The Dark Knight"),
    _movie("tt0071562", "The Godfather Part II"),
    _movie("tt0050083", "12 Angry Men"),
    _movie("tt0108052", "Schindler's List"),
    _movie("tt0167260", "The Lord of the Rings: The Return of the King"),
    _movie("tt0110912", "Pulp Fiction"),
    _movie("tt0060196", "The Good, the Bad and the Ugly"),
    _movie("tt0109830", "Forrest Gump"),
    _movie("tt0137523", "Fight Club"),
    _movie("tt1375666", "Inception"),
    _movie("tt0120737", "The Lord of the Rings: The Fellowship of the Ring"),
    _movie("tt0167261", "The Lord of the Rings: The Two Towers"),
    _movie("tt0080684", "Star Wars: Episode V - The Empire Strikes Back"),
    _movie("tt0133093", "The Matrix"),
    _movie("tt0099685", "Goodfellas"),
    _movie("tt0073486", "One Flew Over the Cuckoo's Nest"),
    _movie("tt0047478", "Seven Samurai"),
    _movie("tt0114369", "Se7en"),
    _series("tt0903747", "Breaking Bad", featured=True),
    _series("tt0944947", "Game of Thrones"),
    _series("tt4574334", "Stranger Things", featured=True),
    _series("tt0386676", "The Office"),
    _series("tt0108778", "Friends"),
    _series("tt2861424", "Rick and Morty"),
    _series("tt4786824", "The Crown", featured=True),
    _series("tt6468322", "Money Heist", featured=True),
    _series("tt13443470", "Wednesday", featured=True),
    _series("tt10919420", "Squid Game", featured=True),
    _series("tt5071412", "Ozark", featured=True),
    _series("tt2442560", "Peaky Blinders"),
    _series("tt5180504", "The Witcher", featured=True),
    _series("tt2707408", "Narcos", featured=True),
    _series("tt5290382", "Mindhunter", featured=True),
    _series("tt5753856", "Dark", featured=True),
    _series("tt10048342", "The Queen's Gambit", featured=True),
    _series("tt4052886", "Lucifer", featured=True),
    _series("tt7221388", "Cobra Kai", featured=True),
    _series("tt11126994", "Arcane", featured=True),
)
