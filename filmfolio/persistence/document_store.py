"""Atomic JSON document store on the local filesystem.

Each document is one file, ``<data_dir>/<name>.json``. Writes are staged to a
temporary file in the same directory, fsynced and renamed over the target, so
a reader always sees either the previous or the new complete content.

Writers to the same document are serialized by a per-name lock; writers to
different documents never contend. ``edit_json`` holds the lock across the
whole read-modify-write so concurrent callers cannot lose updates.
"""

from __future__ import annotations

import contextlib
import copy
import json
import logging
import os
import re
import tempfile
import threading
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

from filmfolio.helpers.exceptions import NotFoundError, StorageIOError, ValidationError

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIX = ".json"
BACKUP_DIR_NAME = ".backups"
BACKUP_KEEP_COUNT = 10
TEMP_SUFFIX = ".tmp"

_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_MISSING = object()


class DocumentStore:
    """Named JSON documents with atomic replace and per-document locking.

    The store owns no domain knowledge; document shapes belong to the
    operation classes in ``persistence/documents``.
    """

    def __init__(self, data_dir: str | Path, backups: bool = True, backup_keep: int = BACKUP_KEEP_COUNT) -> None:
        """
        Args:
            data_dir: Directory holding the documents (created if missing)
            backups: Keep timestamped copies of replaced documents
            backup_keep: Number of backups retained per document
        """
        self.data_dir = Path(data_dir)
        self.backup_dir = self.data_dir / BACKUP_DIR_NAME
        self.backups = backups
        self.backup_keep = backup_keep

        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            if backups:
                self.backup_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"[DocumentStore] Cannot create data directory: {e}")
            raise StorageIOError("failed to create data directory") from e

        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    def _lock_for(self, name: str) -> threading.RLock:
        """Get or create the lock for one document name."""
        with self._locks_guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = threading.RLock()
                self._locks[name] = lock
            return lock

    @contextlib.contextmanager
    def locked(self, name: str) -> Iterator[None]:
        """Hold the document's writer lock for the duration of the block."""
        self._check_name(name)
        with self._lock_for(name):
            yield

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @staticmethod
    def _check_name(name: str) -> None:
        if not name or not _NAME_RE.match(name):
            raise ValidationError(f"invalid document name: {name!r}")

    def path_for(self, name: str) -> Path:
        self._check_name(name)
        return self.data_dir / f"{name}{DOCUMENT_SUFFIX}"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    # ------------------------------------------------------------------
    # Raw bytes
    # ------------------------------------------------------------------

    def read(self, name: str) -> bytes:
        """
        Read the current bytes of a document.

        Raises:
            NotFoundError: Document does not exist
            StorageIOError: Any other filesystem failure
        """
        path = self.path_for(name)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            raise NotFoundError(f"document '{name}' not found") from None
        except OSError as e:
            logger.error(f"[DocumentStore] read failed: document={name} error={e}")
            raise StorageIOError(f"failed to read document '{name}'") from e

    def write(self, name: str, data: bytes) -> None:
        """
        Atomically replace a document.

        Blocks until any concurrent writer of the same document finishes.
        On failure the previous version is left untouched.

        Raises:
            StorageIOError: Staging, backup or rename failed
        """
        with self.locked(name):
            self._write_locked(name, data)

    def _write_locked(self, name: str, data: bytes, backup: bool = True) -> None:
        """Stage, fsync, rename. Caller must hold the document lock."""
        target = self.path_for(name)

        if backup and self.backups and target.exists():
            self._create_backup(name)

        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{target.name}.",
                suffix=TEMP_SUFFIX,
                dir=str(self.data_dir),
            )
        except OSError as e:
            logger.error(f"[DocumentStore] stage failed: document={name} operation=mkstemp error={e}")
            raise StorageIOError(f"failed to write document '{name}'") from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, target)
        except OSError as e:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
            logger.error(f"[DocumentStore] write failed: document={name} operation=stage/rename error={e}")
            raise StorageIOError(f"failed to write document '{name}'") from e

        self._fsync_dir()
        logger.debug(f"[DocumentStore] wrote document={name} bytes={len(data)}")

    def _fsync_dir(self) -> None:
        """Persist the rename itself (directory entry). Not supported everywhere."""
        with contextlib.suppress(OSError, AttributeError):
            dir_fd = os.open(str(self.data_dir), os.O_RDONLY)
            try:
                os.fsync(dir_fd)
            finally:
                os.close(dir_fd)

    def delete(self, name: str) -> bool:
        """Remove a document. Returns False if it did not exist."""
        with self.locked(name):
            try:
                self.path_for(name).unlink()
            except FileNotFoundError:
                return False
            except OSError as e:
                logger.error(f"[DocumentStore] delete failed: document={name} error={e}")
                raise StorageIOError(f"failed to delete document '{name}'") from e
            self._fsync_dir()
            return True

    # ------------------------------------------------------------------
    # JSON
    # ------------------------------------------------------------------

    @staticmethod
    def encode(value: Any) -> bytes:
        return (json.dumps(value, indent=2, ensure_ascii=False) + "\n").encode("utf-8")

    def read_json(self, name: str, default: Any = _MISSING) -> Any:
        """
        Read and decode a document.

        Args:
            name: Document name
            default: Returned when the document does not exist; without it
                a missing document raises NotFoundError

        Raises:
            NotFoundError: Missing document and no default
            StorageIOError: Unreadable or undecodable document
        """
        try:
            raw = self.read(name)
        except NotFoundError:
            if default is _MISSING:
                raise
            return default
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            logger.error(f"[DocumentStore] decode failed: document={name} error={e}")
            raise StorageIOError(f"document '{name}' is not valid JSON") from e

    def write_json(self, name: str, value: Any) -> None:
        """Encode and atomically replace a document."""
        self.write(name, self.encode(value))

    @contextlib.contextmanager
    def edit_json(self, name: str, default: Any) -> Iterator[Any]:
        """
        Locked read-modify-write.

        Yields the decoded document (or a deep copy of ``default`` when it
        does not exist yet). Mutate it in place; it is written back when the
        block exits normally. If the block raises, nothing is written.

        Example:
            with store.edit_json("albums", {"albums": []}) as doc:
                doc["albums"].append(new_album)
        """
        with self.locked(name):
            doc = self.read_json(name, default=copy.deepcopy(default))
            yield doc
            self._write_locked(name, self.encode(doc))

    # ------------------------------------------------------------------
    # Backups
    # ------------------------------------------------------------------

    def _create_backup(self, name: str) -> None:
        """Copy the current version into the backup directory. Caller holds the lock."""
        source = self.path_for(name)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        backup_path = self.backup_dir / f"{source.name}.{stamp}.bak"
        try:
            backup_path.write_bytes(source.read_bytes())
        except OSError as e:
            logger.error(f"[DocumentStore] backup failed: document={name} error={e}")
            raise StorageIOError(f"failed to back up document '{name}'") from e
        self._prune_backups(name)

    def list_backups(self, name: str) -> list[Path]:
        """Backups of a document, oldest first."""
        prefix = self.path_for(name).name + "."
        if not self.backup_dir.is_dir():
            return []
        return sorted(p for p in self.backup_dir.iterdir() if p.name.startswith(prefix) and p.name.endswith(".bak"))

    def _prune_backups(self, name: str) -> None:
        backups = self.list_backups(name)
        for stale in backups[: max(0, len(backups) - self.backup_keep)]:
            try:
                stale.unlink()
            except OSError as e:
                logger.warning(f"[DocumentStore] could not prune backup for document={name}: {e}")

    def rollback(self, name: str) -> None:
        """
        Restore the most recent backup of a document (atomically).

        Raises:
            NotFoundError: No backup exists
            StorageIOError: Backup unreadable or restore failed
        """
        with self.locked(name):
            backups = self.list_backups(name)
            if not backups:
                raise NotFoundError(f"no backups found for document '{name}'")
            latest = backups[-1]
            try:
                data = latest.read_bytes()
            except OSError as e:
                logger.error(f"[DocumentStore] rollback read failed: document={name} error={e}")
                raise StorageIOError(f"failed to read backup of document '{name}'") from e
            self._write_locked(name, data, backup=False)
            with contextlib.suppress(OSError):
                latest.unlink()
        logger.warning(f"[DocumentStore] Rolled back document={name}")

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def cleanup_stale_temp_files(self) -> int:
        """
        Remove staging files left behind by a crash between stage and rename.

        Only safe at startup, before any writer is active.

        Returns:
            Number of files removed
        """
        removed = 0
        for candidate in self.data_dir.glob(f".*{DOCUMENT_SUFFIX}.*{TEMP_SUFFIX}"):
            try:
                candidate.unlink()
                removed += 1
            except OSError as e:
                logger.warning(f"[DocumentStore] could not remove stale staging file: {e}")
        if removed:
            logger.info(f"[DocumentStore] Removed {removed} stale staging file(s)")
        return removed
