"""
Image metadata extraction for the scanner package.

Reads basic image properties and EXIF tags with Pillow and returns them as
(directory, tag, description) triples:
- Image: format, width, height and mode of the image
- IFD0: base EXIF directory (camera make, model, orientation, ...)
- Exif: EXIF sub-directory (exposure, capture dates, lens, ...)
- GPS: GPS sub-directory
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional

from ..config import (
    EXIF_DATE_FORMAT,
    EXIF_DATE_TAGS,
    METADATA_DESCRIPTION_MAX_LENGTH,
    TIMESTAMP_FORMAT,
)
from ..models import MetadataTag
from .dependencies import Image, ExifTags, _logger


# IFD0 entries that only point at sub-directories
_POINTER_TAGS = {int(ExifTags.IFD.Exif), int(ExifTags.IFD.GPSInfo), int(ExifTags.IFD.Interop)}

# Sub-directories read in addition to IFD0, with their tag name tables
_SUB_IFDS = (
    ('Exif', ExifTags.IFD.Exif, ExifTags.TAGS),
    ('GPS', ExifTags.IFD.GPSInfo, ExifTags.GPSTAGS),
)


def describe_value(value: Any) -> str:
    """
    Render a metadata value as text.

    Byte strings that are not printable text (maker notes, thumbnails) are
    summarised by their length. Long descriptions are truncated.
    """
    if isinstance(value, bytes):
        text = value.rstrip(b'\x00').decode('ascii', errors='replace')
        if not text.isprintable():
            return f"<{len(value)} bytes>"
    elif isinstance(value, tuple):
        text = ', '.join(describe_value(v) for v in value)
    else:
        text = str(value)

    text = text.strip().rstrip('\x00')
    if len(text) > METADATA_DESCRIPTION_MAX_LENGTH:
        text = text[:METADATA_DESCRIPTION_MAX_LENGTH - 3] + '...'
    return text


def _ifd_tags(directory: str, ifd, names: dict) -> set[MetadataTag]:
    tags = set()
    for tag_id, value in ifd.items():
        if directory == 'IFD0' and tag_id in _POINTER_TAGS:
            continue
        name = names.get(tag_id, f"Tag 0x{tag_id:04X}")
        tags.add(MetadataTag.create(directory, name, describe_value(value)))
    return tags


def read_metadata(filepath: str | Path) -> set[MetadataTag]:
    """
    Read the metadata tags of an image.

    Args:
        filepath: Path to the image

    Returns:
        Set of MetadataTag triples; empty if the file cannot be read as an image
    """
    try:
        with Image.open(filepath) as img:
            tags = {
                MetadataTag('Image', 'Format', img.format or ''),
                MetadataTag('Image', 'Width', str(img.width)),
                MetadataTag('Image', 'Height', str(img.height)),
                MetadataTag('Image', 'Mode', img.mode or ''),
            }

            exif = img.getexif()
            tags |= _ifd_tags('IFD0', exif, ExifTags.TAGS)
            for directory, ifd_id, names in _SUB_IFDS:
                try:
                    tags |= _ifd_tags(directory, exif.get_ifd(ifd_id), names)
                except Exception as e:
                    _logger.debug(f"Skipping {directory} metadata of {filepath}: {e}")
            return tags

    except Image.UnidentifiedImageError:
        _logger.debug(f"Not a readable image, no metadata: {filepath}")
    except Exception as e:
        _logger.warning(f"Could not read metadata from {filepath}: {e}")
    return set()


def read_capture_timestamp(tags: Iterable[MetadataTag]) -> Optional[str]:
    """
    Get the capture time from EXIF tags.

    DateTimeOriginal is preferred, then DateTimeDigitized, then DateTime.

    Args:
        tags: Tags as returned by read_metadata()

    Returns:
        Timestamp as 'yyyyMMdd HHmmss', or None if no valid date tag exists
    """
    dates = {
        tag.tag: tag.description
        for tag in tags
        if tag.directory in ('IFD0', 'Exif') and tag.tag in EXIF_DATE_TAGS
    }
    for name in EXIF_DATE_TAGS:
        value = dates.get(name)
        if not value:
            continue
        try:
            return datetime.strptime(value.strip(), EXIF_DATE_FORMAT).strftime(TIMESTAMP_FORMAT)
        except ValueError:
            _logger.debug(f"Ignoring malformed EXIF {name}: {value!r}")
    return None


__all__ = [
    'describe_value',
    'read_metadata',
    'read_capture_timestamp',
]
