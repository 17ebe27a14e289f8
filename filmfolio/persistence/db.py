"""Document database facade.

Groups the per-document operation classes over one DocumentStore, the way
services expect to receive persistence: ``db.albums``, ``db.site_config``,
``db.admin_config``.
"""

from __future__ import annotations

from pathlib import Path

from filmfolio.persistence.document_store import DocumentStore
from filmfolio.persistence.documents import AdminConfigDocument, AlbumsDocument, SiteConfigDocument

__all__ = ["Database"]


class Database:
    """Owns the DocumentStore and exposes typed document operations."""

    def __init__(self, data_dir: str | Path, backups: bool = True) -> None:
        self.data_dir = str(data_dir)
        self.store = DocumentStore(data_dir, backups=backups)

        self.albums = AlbumsDocument(self.store)
        self.site_config = SiteConfigDocument(self.store)
        self.admin_config = AdminConfigDocument(self.store)

    def cleanup_stale_temp_files(self) -> int:
        return self.store.cleanup_stale_temp_files()
