"""
Unit tests for filmfolio.persistence.document_store.

Atomicity, per-document locking, backups and crash recovery, all against
a real temp directory.
"""

import json
import multiprocessing
import os
import sys
import threading
from pathlib import Path

import pytest

from filmfolio.helpers.exceptions import NotFoundError, StorageIOError, ValidationError
from filmfolio.persistence.document_store import BACKUP_KEEP_COUNT, DocumentStore


@pytest.fixture
def store(data_dir: Path) -> DocumentStore:
    return DocumentStore(data_dir)


def _staging_files(directory: Path) -> list[Path]:
    return sorted(directory.glob(".*.tmp"))


def _crash_between_stage_and_rename(data_dir: str) -> None:
    """Child process body: stage a write, then die before the rename."""

    def die(*_args, **_kwargs):
        os._exit(1)

    store = DocumentStore(data_dir, backups=False)
    os.replace = die
    store.write_json("albums", {"albums": [{"id": "new", "title": "Never visible"}]})


class TestReadWrite:
    """Basic read/write semantics."""

    @pytest.mark.unit
    def test_write_then_read(self, store: DocumentStore) -> None:
        store.write("albums", b'{"albums": []}')
        assert store.read("albums") == b'{"albums": []}'
        assert store.exists("albums")

    @pytest.mark.unit
    def test_read_missing_raises_not_found(self, store: DocumentStore) -> None:
        with pytest.raises(NotFoundError):
            store.read("albums")

    @pytest.mark.unit
    def test_read_json_default(self, store: DocumentStore) -> None:
        assert store.read_json("albums", default={"albums": []}) == {"albums": []}

    @pytest.mark.unit
    def test_json_is_indented_utf8(self, store: DocumentStore) -> None:
        store.write_json("site_config", {"site": {"title": "Küste"}})

        raw = store.path_for("site_config").read_text(encoding="utf-8")

        assert '  "site"' in raw
        assert "Küste" in raw

    @pytest.mark.unit
    def test_corrupt_document_raises_io_error(self, store: DocumentStore) -> None:
        store.path_for("albums").write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageIOError):
            store.read_json("albums")

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["", "../albums", "albums.json", "a/b", "a b"])
    def test_invalid_names_rejected(self, store: DocumentStore, name: str) -> None:
        with pytest.raises(ValidationError):
            store.path_for(name)

    @pytest.mark.unit
    def test_delete(self, store: DocumentStore) -> None:
        store.write_json("albums", {"albums": []})
        assert store.delete("albums") is True
        assert store.delete("albums") is False
        assert not store.exists("albums")


class TestAtomicity:
    """A failed write leaves the previous version and no staging file."""

    @pytest.mark.unit
    def test_failed_rename_keeps_original(
        self, store: DocumentStore, data_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        # Arrange
        store.write_json("albums", {"albums": ["old"]})

        def failing_replace(*_args, **_kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", failing_replace)

        # Act & Assert
        with pytest.raises(StorageIOError) as exc_info:
            store.write_json("albums", {"albums": ["new"]})
        monkeypatch.undo()

        assert store.read_json("albums") == {"albums": ["old"]}
        assert _staging_files(data_dir) == []
        assert str(data_dir) not in exc_info.value.message

    @pytest.mark.unit
    @pytest.mark.skipif(sys.platform == "win32", reason="needs fork")
    def test_crash_between_stage_and_rename(self, data_dir: Path) -> None:
        """A process killed before the rename leaves the old document readable."""
        # Arrange
        store = DocumentStore(data_dir, backups=False)
        store.write_json("albums", {"albums": [{"id": "A1", "title": "Coastline"}]})
        ctx = multiprocessing.get_context("fork")

        # Act
        child = ctx.Process(target=_crash_between_stage_and_rename, args=(str(data_dir),))
        child.start()
        child.join(timeout=30)

        # Assert - document is the pre-crash version, complete and parseable
        assert child.exitcode == 1
        assert json.loads(store.path_for("albums").read_text()) == {"albums": [{"id": "A1", "title": "Coastline"}]}

        # Restart: the stale staging file is swept
        assert len(_staging_files(data_dir)) == 1
        assert store.cleanup_stale_temp_files() == 1
        assert _staging_files(data_dir) == []

    @pytest.mark.unit
    def test_concurrent_writes_never_mix(self, store: DocumentStore) -> None:
        """Final content equals exactly one writer's payload."""
        payloads = [{"writer": i, "blob": str(i) * 5000} for i in range(8)]
        threads = [threading.Thread(target=store.write_json, args=("albums", p)) for p in payloads]

        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert store.read_json("albums") in payloads


class TestEditJson:
    """Locked read-modify-write."""

    @pytest.mark.unit
    def test_concurrent_edits_lose_nothing(self, store: DocumentStore) -> None:
        def append(i: int) -> None:
            with store.edit_json("albums", {"albums": []}) as doc:
                doc["albums"].append(i)

        threads = [threading.Thread(target=append, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(store.read_json("albums")["albums"]) == list(range(20))

    @pytest.mark.unit
    def test_exception_in_block_writes_nothing(self, store: DocumentStore) -> None:
        store.write_json("albums", {"albums": ["keep"]})

        with pytest.raises(ValidationError):
            with store.edit_json("albums", {"albums": []}) as doc:
                doc["albums"].append("discard")
                raise ValidationError("rejected")

        assert store.read_json("albums") == {"albums": ["keep"]}

    @pytest.mark.unit
    def test_default_is_not_shared(self, store: DocumentStore) -> None:
        default = {"albums": []}
        with store.edit_json("albums", default) as doc:
            doc["albums"].append("x")
        assert default == {"albums": []}

    @pytest.mark.unit
    def test_other_documents_not_blocked(self, store: DocumentStore) -> None:
        """A held albums lock does not stop a site_config write."""
        finished = threading.Event()

        with store.locked("albums"):
            writer = threading.Thread(
                target=lambda: (store.write_json("site_config", {"ok": True}), finished.set())
            )
            writer.start()
            assert finished.wait(timeout=5)
        writer.join()


class TestBackups:
    @pytest.mark.unit
    def test_backup_created_on_replace(self, store: DocumentStore) -> None:
        store.write_json("albums", {"v": 1})
        assert store.list_backups("albums") == []

        store.write_json("albums", {"v": 2})

        backups = store.list_backups("albums")
        assert len(backups) == 1
        assert json.loads(backups[0].read_text()) == {"v": 1}

    @pytest.mark.unit
    def test_backups_pruned(self, store: DocumentStore) -> None:
        for i in range(BACKUP_KEEP_COUNT + 3):
            store.write_json("albums", {"v": i})
        assert len(store.list_backups("albums")) == BACKUP_KEEP_COUNT

    @pytest.mark.unit
    def test_rollback_restores_previous(self, store: DocumentStore) -> None:
        store.write_json("albums", {"v": 1})
        store.write_json("albums", {"v": 2})

        store.rollback("albums")

        assert store.read_json("albums") == {"v": 1}

    @pytest.mark.unit
    def test_rollback_without_backup(self, store: DocumentStore) -> None:
        with pytest.raises(NotFoundError):
            store.rollback("albums")

    @pytest.mark.unit
    def test_backups_disabled(self, data_dir: Path) -> None:
        store = DocumentStore(data_dir, backups=False)
        store.write_json("albums", {"v": 1})
        store.write_json("albums", {"v": 2})
        assert store.list_backups("albums") == []
