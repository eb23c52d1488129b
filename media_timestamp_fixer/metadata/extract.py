import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import exifread
from pymediainfo import MediaInfo

from .. import config
from ..exceptions import ConfigurationError, MetadataProviderError
from .parse import DateFormatSpec, EXIF_DATE_FORMAT, MEDIAINFO_DATE_FORMAT, SHELL_DATE_FORMAT

# (identifier, display name, value)
PropertyRow = Tuple[Any, str, str]


class ShellMetadataProvider:
    """
    Reads the details columns Windows Explorer shows for a file.

    Strategy:
      - One Shell folder namespace per directory (opening it is the expensive
        part, so callers cache the handle per directory).
      - Properties are addressed by column index, see config.SHELL_PROPERTY_INDICES.
      - Values are localized display strings, e.g. "15.01.2024 14:22" with
        invisible direction marks mixed in.
    """

    def __init__(self):
        try:
            import win32com.client
        except ImportError as e:
            raise MetadataProviderError("The shell provider requires pywin32 (Windows only).") from e

        self.shell = win32com.client.Dispatch("Shell.Application")
        self.date_formats: Dict[str, DateFormatSpec] = {
            config.CAPTURE_DATE: SHELL_DATE_FORMAT,
            config.MEDIA_CREATED: SHELL_DATE_FORMAT,
        }

    def open_folder(self, directory: Path):
        folder = self.shell.NameSpace(str(directory))
        if folder is None:
            raise MetadataProviderError(f"Shell could not open folder {directory}")
        return folder

    def get_property(self, folder, path: Path, key: str) -> Optional[str]:
        item = folder.ParseName(path.name)
        if item is None:
            return None
        return folder.GetDetailsOf(item, config.SHELL_PROPERTY_INDICES[key])

    def list_properties(self, folder, path: Path) -> List[PropertyRow]:
        item = folder.ParseName(path.name)
        rows = []
        for index in config.SHELL_INDEX_SCAN_RANGE:
            name = folder.GetDetailsOf(None, index)
            value = folder.GetDetailsOf(item, index) if item is not None else ""
            if name or value:
                rows.append((index, name, value))
        return rows


class ExifMetadataProvider:
    """
    Cross-platform provider.

    Strategies:
      - Capture date: 'exifread' on image files (EXIF DateTimeOriginal first).
      - Media creation date: 'pymediainfo' General track (recorded -> encoded -> tagged).
        Container dates are UTC and get converted to local time by the parser.
    """

    def __init__(self):
        self.date_formats: Dict[str, DateFormatSpec] = {
            config.CAPTURE_DATE: EXIF_DATE_FORMAT,
            config.MEDIA_CREATED: MEDIAINFO_DATE_FORMAT,
        }

    def open_folder(self, directory: Path):
        # Nothing to open per directory; the path itself is the handle
        return directory

    def get_property(self, folder, path: Path, key: str) -> Optional[str]:
        if key == config.CAPTURE_DATE:
            return self._exif_capture_date(path)
        if key == config.MEDIA_CREATED:
            return self._mediainfo_creation_date(path)
        return None

    def list_properties(self, folder, path: Path) -> List[PropertyRow]:
        rows: List[PropertyRow] = []
        if path.suffix.lower() in config.IMAGE_EXTS:
            for tag, value in sorted(self._read_exif_tags(path).items()):
                rows.append((tag, "exif", str(value)))

        try:
            mi = MediaInfo.parse(str(path))
        except Exception as e:
            logging.warning(f"MediaInfo failed for {path}: {e}")
            return rows

        for track in mi.tracks:
            data = track.to_data()
            for attr in sorted(data):
                rows.append((attr, f"mediainfo:{track.track_type}", str(data[attr])))
        return rows

    # --- Internal Extraction Helpers ---

    def _read_exif_tags(self, path: Path) -> Dict[str, Any]:
        with path.open('rb') as f:
            # details=False skips maker notes and thumbnails
            return exifread.process_file(f, details=False)

    def _exif_capture_date(self, path: Path) -> Optional[str]:
        if path.suffix.lower() not in config.IMAGE_EXTS:
            return None
        try:
            tags = self._read_exif_tags(path)
        except Exception as e:
            logging.debug(f"ExifRead failed for {path}: {e}")
            return None

        for tag in config.EXIF_DATE_TAGS:
            if tag in tags:
                return str(tags[tag]).strip()
        return None

    def _mediainfo_creation_date(self, path: Path) -> Optional[str]:
        try:
            mi = MediaInfo.parse(str(path))
        except Exception as e:
            logging.debug(f"MediaInfo failed for {path}: {e}")
            return None

        for track in mi.tracks:
            if track.track_type != "General":
                continue
            for field in config.MEDIAINFO_DATE_FIELDS:
                val = getattr(track, field, None)
                if val:
                    return str(val)
        return None


PROVIDERS = {
    "shell": ShellMetadataProvider,
    "exif": ExifMetadataProvider,
}


def create_provider(name: str = "auto"):
    """Builds a metadata provider; 'auto' picks the Shell on Windows."""
    if name == "auto":
        name = "shell" if sys.platform == "win32" else "exif"
    try:
        factory = PROVIDERS[name]
    except KeyError:
        raise ConfigurationError(f"Unknown metadata provider '{name}'. Choose from: auto, {', '.join(PROVIDERS)}")
    return factory()
