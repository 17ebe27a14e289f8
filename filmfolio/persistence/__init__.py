"""
Persistence package.
"""

from .db import Database
from .document_store import BACKUP_KEEP_COUNT, DocumentStore

__all__ = [
    "BACKUP_KEEP_COUNT",
    "Database",
    "DocumentStore",
]
