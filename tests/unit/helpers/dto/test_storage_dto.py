"""Unit tests for filmfolio.helpers.dto.storage_dto module."""

import pytest

from filmfolio.helpers.dto.album_dto import Photo
from filmfolio.helpers.dto.storage_dto import MissingFile, ReconcileReport, UploadPhotosResult


class TestReconcileReport:
    @pytest.mark.unit
    def test_consistent_when_empty(self) -> None:
        report = ReconcileReport(referenced_files=3, files_on_disk=3)
        assert report.orphan_count == 0
        assert report.is_consistent

    @pytest.mark.unit
    def test_orphans_and_missing_both_count(self) -> None:
        report = ReconcileReport(
            referenced_files=1,
            files_on_disk=1,
            orphan_files=["display/x.webp"],
            missing_files=[MissingFile(album_id="A1", photo_id="p1", path="originals/p1.jpg")],
        )
        assert report.orphan_count == 2
        assert not report.is_consistent


class TestUploadPhotosResult:
    @pytest.mark.unit
    def test_to_dict_hides_orphan_ids(self) -> None:
        result = UploadPhotosResult(uploaded=[Photo(id="p1")], errors=["b.gif: unsupported file type"])
        result.orphaned_photo_ids.append("p2")

        data = result.to_dict()

        assert [p["id"] for p in data["uploaded"]] == ["p1"]
        assert data["errors"] == ["b.gif: unsupported file type"]
        assert "orphaned_photo_ids" not in data
