"""
Albums package.
"""

from .album_validation_comp import renumber_photos, validate_album, validate_cover, validate_reorder
from .identity_comp import generate_slug, generate_unique_slug, new_unique_id

__all__ = [
    "generate_slug",
    "generate_unique_slug",
    "new_unique_id",
    "renumber_photos",
    "validate_album",
    "validate_cover",
    "validate_reorder",
]
