"""Albums document operations (``albums.json``, shape ``{"albums": [...]}``)."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from filmfolio.helpers.dto.album_dto import Album

if TYPE_CHECKING:
    from filmfolio.persistence.document_store import DocumentStore

ALBUMS_DOCUMENT = "albums"


class AlbumsDocument:
    """Typed access to the album collection."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.name = ALBUMS_DOCUMENT

    def load(self) -> list[Album]:
        """All albums in stored order (empty when the document does not exist)."""
        doc = self.store.read_json(self.name, default={"albums": []})
        return [Album.from_dict(a) for a in doc.get("albums") or []]

    def find(self, album_id: str) -> Album | None:
        for album in self.load():
            if album.id == album_id:
                return album
        return None

    @contextmanager
    def edit(self) -> Iterator[list[Album]]:
        """Locked read-modify-write over the whole collection.

        The yielded list may be mutated freely; it replaces the stored
        collection when the block exits without raising.
        """
        with self.store.edit_json(self.name, default={"albums": []}) as doc:
            albums = [Album.from_dict(a) for a in doc.get("albums") or []]
            yield albums
            doc["albums"] = [a.to_dict() for a in albums]
