"""Site config document operations (``site_config.json``)."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from filmfolio.helpers.dto.config_dto import SiteConfig

if TYPE_CHECKING:
    from filmfolio.persistence.document_store import DocumentStore

SITE_CONFIG_DOCUMENT = "site_config"


class SiteConfigDocument:
    """Typed access to the singleton site configuration."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.name = SITE_CONFIG_DOCUMENT

    def load(self) -> SiteConfig | None:
        """Stored config, or None when the document has never been written."""
        data = self.store.read_json(self.name, default=None)
        return SiteConfig.from_dict(data) if data else None

    def save(self, config: SiteConfig) -> None:
        self.store.write_json(self.name, config.to_dict())

    @contextmanager
    def edit(self, default_factory: Callable[[], SiteConfig]) -> Iterator[SiteConfig]:
        """Locked read-modify-write; starts from default_factory() if absent."""
        with self.store.edit_json(self.name, default={}) as doc:
            config = SiteConfig.from_dict(doc) if doc else default_factory()
            yield config
            doc.clear()
            doc.update(config.to_dict())
