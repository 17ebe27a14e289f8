"""
Album workflows.
"""

from .delete_album_wf import delete_album_workflow
from .delete_photo_wf import delete_all_photos_workflow, delete_photo_workflow
from .upload_photos_wf import upload_photos_workflow

__all__ = [
    "delete_album_workflow",
    "delete_all_photos_workflow",
    "delete_photo_workflow",
    "upload_photos_workflow",
]
