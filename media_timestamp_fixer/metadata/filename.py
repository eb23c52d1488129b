from datetime import datetime, timedelta
from typing import Optional

from .. import config
from ..exceptions import InvalidFilenameDateError
from ..models import Candidate, Source


def extract_filename_candidate(filename: str) -> Optional[Candidate]:
    """
    Derives a coarse timestamp from a WhatsApp style filename.

    IMG-20240115-WA0003.jpg -> 2024-01-15 10:03

    The filename only carries the capture day. The WA sequence number is a
    per-day ordinal, mapped to minutes after 10:00 so files from the same day
    keep their relative order. Sequence numbers >= 1440 spill into the next
    day; that is left as-is.

    Returns None when the name does not follow the grammar.
    Raises InvalidFilenameDateError when it does but the date is impossible.
    """
    match = config.FILENAME_PATTERN.match(filename)
    if not match:
        return None

    digits = f"{match['year']}{match['month']}{match['day']}"
    sequence = int(match['seq'])
    try:
        day = datetime(int(match['year']), int(match['month']), int(match['day']))
        value = day + config.DUMMY_TIME_BASE + timedelta(minutes=sequence)
    except (ValueError, OverflowError) as e:
        raise InvalidFilenameDateError(filename, digits, str(e)) from e

    return Candidate(Source.FILENAME, value)
