"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from PIL import Image

from photocatalog.catalog import Catalog
from photocatalog.models import CatalogEntry
from photocatalog.user_config import get_user_config


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests (canonical path)."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir).resolve()
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def sample_images(temp_dir):
    """
    Create a set of sample files for testing.

    Returns:
        dict with paths to:
        - identical1.png, identical2.png (byte-identical copies)
        - unique.png (unique image)
        - exif.jpg (JPEG with camera make/model and DateTime EXIF tags)
        - notes.txt (not an image)
        - README (no extension)
    """
    images = {}

    # Create identical images (100x100 red square)
    img1 = Image.new('RGB', (100, 100), color='red')
    path1 = temp_dir / "identical1.png"
    img1.save(path1, 'PNG')
    images['identical1'] = str(path1)

    # Exact copy
    path2 = temp_dir / "identical2.png"
    path2.write_bytes(path1.read_bytes())
    images['identical2'] = str(path2)

    # Unique image (100x100 blue square)
    img2 = Image.new('RGB', (100, 100), color='blue')
    path3 = temp_dir / "unique.png"
    img2.save(path3, 'PNG')
    images['unique'] = str(path3)

    # JPEG with EXIF tags in the base directory
    exif = Image.Exif()
    exif[0x010F] = "TestMake"             # Make
    exif[0x0110] = "TestCam"              # Model
    exif[0x0132] = "2020:01:02 03:04:05"  # DateTime
    img3 = Image.new('RGB', (64, 48), color='green')
    path4 = temp_dir / "exif.jpg"
    img3.save(path4, 'JPEG', exif=exif)
    images['exif'] = str(path4)

    # Not an image
    path5 = temp_dir / "notes.txt"
    path5.write_text("not an image")
    images['notes'] = str(path5)

    # No extension
    path6 = temp_dir / "README"
    path6.write_text("no extension")
    images['readme'] = str(path6)

    return images


@pytest.fixture
def isolated_config(temp_dir, monkeypatch):
    """User configuration read from an empty directory, with no overriding environment."""
    monkeypatch.setenv('PHOTOCATALOG_CONFIG_DIR', str(temp_dir / "config"))
    for name in ('PHOTOCATALOG_DB_FILE', 'PHOTOCATALOG_RECURSIVE',
                 'PHOTOCATALOG_EXIF_TIMESTAMP', 'PHOTOCATALOG_SHOW_PROGRESS'):
        monkeypatch.delenv(name, raising=False)

    config = get_user_config()
    config.reload()
    yield config
    config.reload()


@pytest.fixture
def make_entry():
    """
    Factory for complete, unsaved catalog entries.

    Example:
        entry = make_entry('/photos/a.jpg', size=100, checksum=42)
    """
    def _make(path="/photos/a.jpg", size=100, checksum=42, timestamp="20240101 120000", metadata=()):
        location, filename = path.rsplit('/', 1)
        name, _, extension = filename.rpartition('.')
        return CatalogEntry(
            full_path=path,
            location=location or '/',
            name=name,
            extension=extension,
            timestamp=timestamp,
            size=size,
            checksum=checksum,
            metadata=set(metadata),
        )
    return _make


class FakeComparator:
    """
    Comparator double for duplicate confirmation.

    Paths in the same group compare identical; with no groups every pair
    compares identical. Every call is recorded.
    """

    def __init__(self, groups=None):
        self.groups = [set(g) for g in groups] if groups is not None else None
        self.calls = []

    def __call__(self, first, second):
        self.calls.append((first, second))
        if self.groups is None:
            return True
        return any(first in g and second in g for g in self.groups)


@pytest.fixture
def comparator():
    """Comparator reporting every pair as identical."""
    return FakeComparator()


@pytest.fixture
def catalog(comparator):
    """Empty catalog using the fake comparator."""
    return Catalog(comparator=comparator)


@pytest.fixture
def make_catalog():
    """
    Factory for an empty catalog whose comparator knows which paths are identical.

    Example:
        catalog, comparator = make_catalog([{'/p/a.jpg', '/p/b.jpg'}])
    """
    def _make(groups=None):
        fake = FakeComparator(groups)
        return Catalog(comparator=fake), fake
    return _make
