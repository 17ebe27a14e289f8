"""
Workflows package.
"""

from .albums.delete_album_wf import delete_album_workflow
from .albums.delete_photo_wf import delete_all_photos_workflow, delete_photo_workflow
from .albums.upload_photos_wf import upload_photos_workflow
from .storage.reconcile_uploads_wf import reconcile_uploads_workflow

__all__ = [
    "delete_album_workflow",
    "delete_all_photos_workflow",
    "delete_photo_workflow",
    "reconcile_uploads_workflow",
    "upload_photos_workflow",
]
