"""Identifier and slug generation for albums and photos.

Uniqueness is only meaningful against the collection loaded inside the
albums document lock; callers pass that collection in.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable, Iterable

_SLUG_INVALID = re.compile(r"[^a-z0-9-]")
_SLUG_DASHES = re.compile(r"-{2,}")

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def generate_slug(title: str) -> str:
    """URL-friendly slug from a title.

    Lowercases, turns spaces into hyphens, drops anything outside
    ``[a-z0-9-]``, collapses runs of hyphens and trims them from the ends.
    Falls back to a random UUID when nothing survives.

    Example:
        >>> generate_slug("Coastline, 2024!")
        'coastline-2024'
    """
    slug = title.lower().replace(" ", "-")
    slug = _SLUG_INVALID.sub("", slug)
    slug = _SLUG_DASHES.sub("-", slug).strip("-")
    return slug or str(uuid.uuid4())


def generate_unique_slug(base_slug: str, taken: Iterable[str]) -> str:
    """Return base_slug, or base_slug-1, base_slug-2, ... whichever is free."""
    existing = set(taken)
    if base_slug not in existing:
        return base_slug
    suffix = 1
    while f"{base_slug}-{suffix}" in existing:
        suffix += 1
    return f"{base_slug}-{suffix}"


def new_unique_id(taken: Iterable[str], factory: Callable[[], str] | None = None) -> str:
    """Mint an ID not present in ``taken``.

    uuid4 collisions are astronomically unlikely; the check guards against a
    broken or injected factory rather than randomness.

    Raises:
        RuntimeError: factory kept producing taken IDs
    """
    make = factory or (lambda: str(uuid.uuid4()))
    existing = set(taken)
    for _ in range(16):
        candidate = make()
        if candidate not in existing:
            return candidate
    raise RuntimeError("could not generate a unique identifier")
