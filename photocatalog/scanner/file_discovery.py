"""
File discovery module for the scanner package.

Provides functionality to classify paths, split file names and enumerate
image files in directories, with support for recursive scanning and
HEIC/HEIF format detection.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

from ..config import IMAGE_EXTENSIONS
from .dependencies import HAS_HEIF_SUPPORT


class PathKind(Enum):
    """What a path on disk refers to."""
    FILE = 'F'
    DIRECTORY = 'D'
    MISSING = 'E'


def check_path(path: str | Path) -> PathKind:
    """
    Classify a path as a regular file, a directory, or neither.

    Example:
        if check_path(arg) is PathKind.DIRECTORY:
            files = find_image_files(arg)
    """
    if os.path.isfile(path):
        return PathKind.FILE
    if os.path.isdir(path):
        return PathKind.DIRECTORY
    return PathKind.MISSING


def split_filename(filename: str) -> tuple[str, str]:
    """
    Split a file name into stem and extension (without the dot).

    A leading dot (hidden file) or a trailing dot does not start an
    extension; such names have an empty extension.

    Example:
        split_filename('IMG_001.JPG')     # ('IMG_001', 'JPG')
        split_filename('archive.tar.gz')  # ('archive.tar', 'gz')
        split_filename('.hidden')         # ('.hidden', '')
        split_filename('notes.')          # ('notes.', '')
    """
    last_dot = filename.rfind('.')
    if 0 < last_dot < len(filename) - 1:
        return filename[:last_dot], filename[last_dot + 1:]
    return filename, ''


def supported_extensions() -> set[str]:
    """Return the image extensions that can be cataloged (lower-case, with dot)."""
    if HAS_HEIF_SUPPORT:
        return set(IMAGE_EXTENSIONS)
    return {ext for ext in IMAGE_EXTENSIONS if ext not in {'.heic', '.heif'}}


def is_image_file(path: str | Path) -> bool:
    """Check whether a file name has a supported image extension."""
    _, extension = split_filename(Path(path).name)
    return bool(extension) and f".{extension.lower()}" in supported_extensions()


def find_image_files(root_path: str | Path, recursive: bool = True) -> list[str]:
    """
    Find all image files in the given directory.

    Args:
        root_path: Directory path to search for images
        recursive: If True, search subdirectories recursively

    Returns:
        Sorted list of absolute file paths as strings

    Notes:
        - Automatically filters out HEIC/HEIF files if pillow-heif is not installed
        - Handles symlinks by resolving to canonical paths
        - Deduplicates files that may be encountered via multiple paths
    """
    root = Path(root_path)

    images = []
    seen = set()  # Track resolved paths to avoid duplicates

    # Choose iterator based on recursive flag
    iterator = root.rglob('*') if recursive else root.glob('*')

    for filepath in iterator:
        if filepath.is_file() and is_image_file(filepath):
            # Resolve to absolute path and deduplicate
            resolved = str(filepath.resolve())
            if resolved not in seen:
                seen.add(resolved)
                images.append(resolved)

    return sorted(images)


__all__ = [
    'PathKind',
    'check_path',
    'split_filename',
    'supported_extensions',
    'is_image_file',
    'find_image_files',
]
