"""
Dependency initialization for the scanner package.

Handles PIL, HEIC/HEIF support, and tqdm imports with proper error handling
and configuration.
"""

from __future__ import annotations

import warnings
import logging
from typing import Optional, Any

from ..config import MAX_IMAGE_PIXELS

# Module-level logger
_logger = logging.getLogger(__name__)

# Check for required dependencies
try:
    from PIL import Image, ExifTags
except ImportError:
    raise ImportError(
        "Required package not found!\n"
        "Install with: pip install Pillow"
    )

# Register HEIC/HEIF support via pillow-heif
# This must be done before opening any HEIC files
HAS_HEIF_SUPPORT = False
try:
    from pillow_heif import register_heif_opener
    register_heif_opener()
    HAS_HEIF_SUPPORT = True
    _logger.debug("HEIC/HEIF support enabled via pillow-heif")
except ImportError:
    _logger.warning(
        "pillow-heif not installed - HEIC/HEIF metadata will not be read. "
        "Install with: pip install pillow-heif"
    )

# Large scans and panoramas exceed PIL's default decompression bomb limit
Image.MAX_IMAGE_PIXELS = MAX_IMAGE_PIXELS

# Metadata is read without decoding pixels, so bomb warnings are noise here
warnings.filterwarnings("ignore", category=Image.DecompressionBombWarning)

# Optional: tqdm for progress bars
# Store as Optional[Any] to satisfy type checkers when tqdm is not installed
HAS_TQDM = False
_tqdm_class: Optional[Any] = None

try:
    from tqdm import tqdm as _tqdm_import
    HAS_TQDM = True
    _tqdm_class = _tqdm_import
except ImportError:
    pass


def make_progress_bar(total: int, desc: str, unit: str, enabled: bool = True) -> Optional[Any]:
    """
    Create a tqdm progress bar, or None when tqdm is missing or disabled.

    Example:
        pbar = make_progress_bar(len(paths), "Adding files", "file")
        for path in paths:
            ...
            if pbar is not None:
                pbar.update(1)
    """
    if HAS_TQDM and enabled and total > 1 and _tqdm_class is not None:
        return _tqdm_class(total=total, desc=desc, unit=unit, ncols=80)
    return None


__all__ = [
    'Image',
    'ExifTags',
    'HAS_HEIF_SUPPORT',
    'HAS_TQDM',
    '_tqdm_class',
    '_logger',
    'make_progress_bar',
]
