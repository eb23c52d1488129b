import pytest
from datetime import datetime
from pathlib import Path

from media_timestamp_fixer import config
from media_timestamp_fixer.exceptions import TimestampWriteError
from media_timestamp_fixer.metadata.parse import SHELL_DATE_FORMAT
from media_timestamp_fixer.models import MediaFile


class FakeProvider:
    """In-memory metadata provider keyed by filename."""

    def __init__(self, values=None):
        self.values = values or {}
        self.date_formats = {
            config.CAPTURE_DATE: SHELL_DATE_FORMAT,
            config.MEDIA_CREATED: SHELL_DATE_FORMAT,
        }
        self.opened = []
        self.lookups = []

    def open_folder(self, directory):
        self.opened.append(directory)
        return directory

    def get_property(self, folder, path, key):
        self.lookups.append((path.name, key))
        return self.values.get(path.name, {}).get(key)

    def list_properties(self, folder, path):
        return [(key, key, value) for key, value in self.values.get(path.name, {}).items()]


class FakeAccessor:
    """Keeps timestamps in a dict instead of on disk."""

    def __init__(self):
        self.times = {}
        self.fail_paths = set()
        self.applied = []

    def set(self, path: Path, creation: datetime, modification: datetime):
        self.times[path] = (creation, modification)

    def read(self, path: Path) -> MediaFile:
        if path not in self.times:
            raise FileNotFoundError(path)
        creation, modification = self.times[path]
        return MediaFile(path, creation, modification)

    def apply(self, path: Path, decision):
        if path in self.fail_paths:
            raise TimestampWriteError(f"Access denied: {path}")
        self.applied.append((path, decision))
        creation, modification = self.times[path]
        if decision.target_creation is not None:
            creation = decision.target_creation
        if decision.target_modification is not None:
            modification = decision.target_modification
        self.times[path] = (creation, modification)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def accessor():
    return FakeAccessor()


@pytest.fixture
def media_dir(tmp_path):
    """Returns a directory factory: touch(name) creates an empty file in it."""
    root = tmp_path / "media"
    root.mkdir()

    def touch(name: str) -> Path:
        p = root / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(b"")
        return p

    touch.root = root
    return touch
