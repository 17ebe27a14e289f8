"""Admin credential document operations (``admin_config.json``)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from filmfolio.helpers.dto.auth_dto import AdminCredential

if TYPE_CHECKING:
    from filmfolio.persistence.document_store import DocumentStore

ADMIN_CONFIG_DOCUMENT = "admin_config"


class AdminConfigDocument:
    """Singleton ``{username, password_hash}`` record."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.name = ADMIN_CONFIG_DOCUMENT

    def load(self) -> AdminCredential | None:
        data = self.store.read_json(self.name, default=None)
        if not data:
            return None
        return AdminCredential.from_dict(data)

    def save(self, credential: AdminCredential) -> None:
        """Atomic replace; raises StorageIOError on failure."""
        self.store.write_json(self.name, credential.to_dict())
