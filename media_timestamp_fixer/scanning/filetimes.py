"""
Reading and writing file creation/modification times.

Timestamps are naive local datetimes at microsecond precision. Both
attributes go through the same nanosecond -> microsecond truncation, so
exact comparisons between them and a candidate are consistent, and a value
written here reads back unchanged.

Creation time support depends on the platform:
  - Windows: st_birthtime (3.12+) or st_ctime; written with win32file.SetFileTime
  - macOS:   st_birthtime; written with the developer tools' SetFile
  - Linux:   st_ctime (inode change time) is the closest readable value and
             cannot be set, so creation writes fail with TimestampWriteError
"""
import os
import subprocess
import sys
from datetime import datetime
from pathlib import Path
from typing import List

from ..exceptions import TimestampWriteError
from ..models import Decision, MediaFile

NS_PER_SECOND = 1_000_000_000


def ns_to_datetime(ns: int) -> datetime:
    seconds, remainder = divmod(ns, NS_PER_SECOND)
    return datetime.fromtimestamp(seconds).replace(microsecond=remainder // 1000)


def datetime_to_ns(dt: datetime) -> int:
    whole_seconds = int(dt.replace(microsecond=0).timestamp())
    return whole_seconds * NS_PER_SECOND + dt.microsecond * 1000


class FileTimeAccessor:
    def __init__(self, platform: str = sys.platform):
        self.platform = platform

    def read(self, path: Path) -> MediaFile:
        st = path.stat()
        return MediaFile(
            path=path,
            creation_time=self._creation_time(st),
            modification_time=ns_to_datetime(st.st_mtime_ns),
        )

    def apply(self, path: Path, decision: Decision):
        """
        Writes only the attributes the decision sets. A failure on one
        attribute does not stop the other from being written.
        """
        errors: List[str] = []

        if decision.target_creation is not None:
            try:
                self.set_creation_time(path, decision.target_creation)
            except TimestampWriteError as e:
                errors.append(str(e))

        if decision.target_modification is not None:
            try:
                self.set_modification_time(path, decision.target_modification)
            except TimestampWriteError as e:
                errors.append(str(e))

        if errors:
            raise TimestampWriteError("; ".join(errors))

    def set_modification_time(self, path: Path, dt: datetime):
        try:
            st = path.stat()
            os.utime(path, ns=(st.st_atime_ns, datetime_to_ns(dt)))
        except OSError as e:
            raise TimestampWriteError(f"Failed to set modification time on {path}: {e}") from e

    def set_creation_time(self, path: Path, dt: datetime):
        if self.platform == "win32":
            self._set_creation_time_windows(path, dt)
        elif self.platform == "darwin":
            self._set_creation_time_macos(path, dt)
        else:
            raise TimestampWriteError(f"Setting creation time is not supported on {self.platform}: {path}")

    # --- Platform Helpers ---

    def _creation_time(self, st: os.stat_result) -> datetime:
        birth_ns = getattr(st, "st_birthtime_ns", None)
        if birth_ns is not None:
            return ns_to_datetime(birth_ns)

        birth = getattr(st, "st_birthtime", None)
        if birth is not None:
            return ns_to_datetime(round(birth * 1_000_000) * 1000)

        return ns_to_datetime(st.st_ctime_ns)

    def _set_creation_time_windows(self, path: Path, dt: datetime):
        try:
            import pywintypes
            import win32file
        except ImportError as e:
            raise TimestampWriteError("Setting creation time on Windows requires pywin32.") from e

        try:
            handle = win32file.CreateFile(
                str(path),
                win32file.GENERIC_WRITE,
                win32file.FILE_SHARE_READ | win32file.FILE_SHARE_WRITE | win32file.FILE_SHARE_DELETE,
                None,
                win32file.OPEN_EXISTING,
                win32file.FILE_ATTRIBUTE_NORMAL,
                None
            )
            try:
                # None leaves access and write time untouched
                win32file.SetFileTime(handle, pywintypes.Time(dt.astimezone()), None, None)
            finally:
                handle.Close()
        except pywintypes.error as e:
            raise TimestampWriteError(f"Failed to set creation time on {path}: {e}") from e

    def _set_creation_time_macos(self, path: Path, dt: datetime):
        # SetFile only takes whole seconds
        cmd = ["SetFile", "-d", dt.strftime("%m/%d/%Y %H:%M:%S"), str(path)]
        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise TimestampWriteError(f"Failed to set creation time on {path}: {e}") from e
