"""
Configuration constants for Photo Catalog.

This module contains all configurable settings including:
- Supported image extensions
- Reserved keywords managed by the catalog engine
- Snapshot file naming and versioning
- Probe and metadata extraction limits
"""

# All supported image extensions (comprehensive list)
IMAGE_EXTENSIONS = {
    # Common formats
    '.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp', '.tiff', '.tif',
    # RAW formats
    '.raw', '.cr2', '.cr3', '.nef', '.arw', '.dng', '.orf', '.rw2',
    '.pef', '.srw', '.raf', '.3fr', '.dcr', '.kdc', '.mrw', '.nrw',
    # Other formats
    '.ico', '.icns', '.psd', '.psb', '.xcf', '.svg', '.eps',
    '.heic', '.heif', '.avif', '.jxl',
    '.pbm', '.pgm', '.ppm', '.pnm',
    '.tga', '.dds', '.exr', '.hdr',
    '.jp2', '.j2k', '.jpf', '.jpx', '.jpm',
    '.pcx', '.sgi', '.rgb', '.rgba', '.bw',
}

# Reserved keywords, maintained by duplicate detection and rescanning
KEYWORD_DUPLICATE = 'DUP'
KEYWORD_POTENTIAL_DUPLICATE = 'DUP?'
KEYWORD_CHANGED = 'CHANGED'
KEYWORD_DELETED = 'DELETED'

DUPLICATE_KEYWORDS = frozenset({KEYWORD_DUPLICATE, KEYWORD_POTENTIAL_DUPLICATE})
RESERVED_KEYWORDS = frozenset({
    KEYWORD_DUPLICATE,
    KEYWORD_POTENTIAL_DUPLICATE,
    KEYWORD_CHANGED,
    KEYWORD_DELETED,
})

# Timestamps are stored as strings: yyyyMMdd HHmmss
TIMESTAMP_FORMAT = '%Y%m%d %H%M%S'

# EXIF tags checked (in order) for the capture time of a photo
EXIF_DATE_TAGS = ('DateTimeOriginal', 'DateTimeDigitized', 'DateTime')
EXIF_DATE_FORMAT = '%Y:%m:%d %H:%M:%S'

# Metadata descriptions longer than this are truncated (binary maker notes etc.)
METADATA_DESCRIPTION_MAX_LENGTH = 200

# Chunk size for checksum calculation and byte comparison
CHECKSUM_CHUNK_SIZE = 64 * 1024

# Snapshot file
DEFAULT_DB_FILENAME = 'photo_db.json'
DEFAULT_DB_SUFFIX = '.json'
SNAPSHOT_FORMAT = 'photocatalog-snapshot'
SNAPSHOT_VERSION = 1

# Increase PIL's decompression bomb limit for large images (500 megapixels)
MAX_IMAGE_PIXELS = 500_000_000

# Program information shown by the shell
PROGRAM_NAME = 'Photo Catalog'
