import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .. import config


@dataclass(frozen=True)
class DateFormatSpec:
    """
    One accepted date layout for a metadata property.

    pattern:    strptime pattern applied to the cleaned value
    shape:      optional regex the cleaned value must fully match
                (strptime alone accepts single-digit days and months)
    assume_utc: value is a UTC wall time and is converted to local time
    """
    name: str
    pattern: str
    shape: Optional[str] = None
    assume_utc: bool = False


SHELL_DATE_FORMAT = DateFormatSpec(
    name="shell",
    pattern=config.SHELL_DATE_PATTERN,
    shape=config.SHELL_DATE_SHAPE,
)

EXIF_DATE_FORMAT = DateFormatSpec(
    name="exif",
    pattern=config.EXIF_DATE_PATTERN,
    shape=config.EXIF_DATE_SHAPE,
)

MEDIAINFO_DATE_FORMAT = DateFormatSpec(
    name="mediainfo",
    pattern=config.MEDIAINFO_DATE_PATTERN,
    shape=config.MEDIAINFO_DATE_SHAPE,
    assume_utc=True,
)


def clean_metadata_value(raw: str) -> str:
    """Drops everything except digits, whitespace, '.' and ':'."""
    stripped = config.METADATA_NOISE.sub('', raw)
    return ' '.join(stripped.split())


def parse_metadata_date(raw: Optional[str], fmt: DateFormatSpec) -> Optional[datetime]:
    """
    Turns a raw metadata string into a naive local datetime.

    Malformed input yields None, never an exception. Only the single layout
    described by `fmt` is tried.
    """
    if raw is None or not raw.strip():
        return None

    clean = clean_metadata_value(raw)
    if fmt.shape and not re.fullmatch(fmt.shape, clean, re.ASCII):
        return None

    try:
        dt = datetime.strptime(clean, fmt.pattern)
    except ValueError:
        return None

    if fmt.assume_utc:
        try:
            dt = dt.replace(tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            # Edge of the datetime range, or before the epoch on Windows
            return None
    return dt
