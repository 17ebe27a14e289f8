"""Image decoding, EXIF extraction and WebP rendition output (Pillow).

Leaf functions only: no knowledge of albums or documents. The image
service composes them into a full upload.
"""

from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from PIL import ExifTags, Image, UnidentifiedImageError

from filmfolio.helpers.dto.album_dto import Exif
from filmfolio.helpers.exceptions import ValidationError
from filmfolio.helpers.time_helper import to_iso

logger = logging.getLogger(__name__)

# Pillow format name -> extension used for the stored original
ALLOWED_FORMATS: dict[str, str] = {
    "JPEG": ".jpg",
    "PNG": ".png",
    "WEBP": ".webp",
}

# EXIF tag ids (TIFF/EXIF 2.3)
_TAG_MAKE = 0x010F
_TAG_MODEL = 0x0110
_TAG_DATETIME = 0x0132
_TAG_EXPOSURE_TIME = 0x829A
_TAG_FNUMBER = 0x829D
_TAG_ISO = 0x8827
_TAG_DATETIME_ORIGINAL = 0x9003
_TAG_FOCAL_LENGTH = 0x920A
_TAG_LENS_MODEL = 0xA434


@dataclass
class DecodedImage:
    """A fully loaded upload plus the facts needed to store it."""

    image: Image.Image
    format: str
    extension: str
    width: int
    height: int


def decode_image(data: bytes) -> DecodedImage:
    """
    Decode upload bytes, accepting only JPEG, PNG and WebP by content.

    The file name and declared content type are never trusted.

    Raises:
        ValidationError: Unsupported type, corrupt data or decompression bomb
    """
    try:
        image = Image.open(io.BytesIO(data))
    except UnidentifiedImageError as e:
        raise ValidationError("unsupported file type") from e
    except Image.DecompressionBombError as e:
        raise ValidationError("image dimensions too large") from e
    except OSError as e:
        raise ValidationError("failed to decode image") from e

    image_format = image.format or ""
    try:
        if image_format not in ALLOWED_FORMATS:
            raise ValidationError(f"unsupported file type: {image_format.lower() or 'unknown'}")
        image.load()
    except ValidationError:
        image.close()
        raise
    except Image.DecompressionBombError as e:
        image.close()
        raise ValidationError("image dimensions too large") from e
    except OSError as e:
        # Truncated or otherwise undecodable data
        image.close()
        raise ValidationError("failed to decode image") from e

    width, height = image.size
    return DecodedImage(
        image=image,
        format=image_format,
        extension=ALLOWED_FORMATS[image_format],
        width=width,
        height=height,
    )


def _ratio(value: Any) -> float | None:
    try:
        if isinstance(value, tuple):
            return float(value[0]) / float(value[1])
        return float(value)
    except (TypeError, ValueError, ZeroDivisionError):
        return None


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    return str(value).strip("\x00 ") if value is not None else ""


def _exif_date(value: Any) -> str | None:
    text = _text(value)
    if not text:
        return None
    try:
        return to_iso(datetime.strptime(text, "%Y:%m:%d %H:%M:%S"))
    except ValueError:
        return None


def extract_exif(image: Image.Image) -> Exif | None:
    """
    Camera metadata from an image, or None when it carries no EXIF.

    Missing or malformed individual tags are skipped; EXIF is never a
    reason to reject an upload.
    """
    try:
        base = image.getexif()
    except (OSError, ValueError, SyntaxError) as e:
        logger.debug(f"[ImageProcessing] EXIF unreadable: {e}")
        return None
    if not base:
        return None
    try:
        detail = base.get_ifd(ExifTags.IFD.Exif)
    except (OSError, ValueError, KeyError):
        detail = {}

    result = Exif()
    result.camera = f"{_text(base.get(_TAG_MAKE))} {_text(base.get(_TAG_MODEL))}".strip()
    result.lens = _text(detail.get(_TAG_LENS_MODEL))

    iso = detail.get(_TAG_ISO)
    if isinstance(iso, tuple):
        iso = iso[0] if iso else None
    if isinstance(iso, int):
        result.iso = iso

    aperture = _ratio(detail.get(_TAG_FNUMBER))
    if aperture:
        result.aperture = f"f/{aperture:.1f}"

    exposure = _ratio(detail.get(_TAG_EXPOSURE_TIME))
    if exposure:
        result.shutter_speed = f"1/{round(1 / exposure)}" if exposure < 1 else f"{exposure:.1f}s"

    focal = _ratio(detail.get(_TAG_FOCAL_LENGTH))
    if focal:
        result.focal_length = f"{focal:.0f}mm"

    result.date_taken = _exif_date(detail.get(_TAG_DATETIME_ORIGINAL) or base.get(_TAG_DATETIME))
    return result


def write_file(path: str | Path, data: bytes) -> int:
    """Write bytes to a new file, fsync it and return its size."""
    with open(path, "wb") as f:
        f.write(data)
        f.flush()
        os.fsync(f.fileno())
    return len(data)


def save_webp_rendition(image: Image.Image, path: str | Path, max_px: int, quality: int) -> int:
    """
    Save a WebP copy that fits within max_px x max_px (never upscaled).

    Returns:
        Size of the written file in bytes
    """
    rendition = image.copy()
    rendition.thumbnail((max_px, max_px), Image.Resampling.LANCZOS)
    if rendition.mode not in ("RGB", "RGBA"):
        has_alpha = rendition.mode in ("LA", "PA") or "transparency" in rendition.info
        rendition = rendition.convert("RGBA" if has_alpha else "RGB")
    rendition.save(path, format="WEBP", quality=quality)
    return os.path.getsize(path)
