"""
Storage package.
"""

from .disk_usage_comp import compute_storage_stats, measure_breakdown, usage_warning
from .image_processing_comp import DecodedImage, decode_image, extract_exif, save_webp_rendition, write_file
from .reconcile_comp import compare, delete_upload_files, list_upload_files, referenced_paths, url_to_relative_path

__all__ = [
    "DecodedImage",
    "compare",
    "compute_storage_stats",
    "decode_image",
    "delete_upload_files",
    "extract_exif",
    "list_upload_files",
    "measure_breakdown",
    "referenced_paths",
    "save_webp_rendition",
    "url_to_relative_path",
    "usage_warning",
    "write_file",
]
