import logging
from pathlib import Path
from typing import Callable, Dict, Optional

from .. import config
from ..metadata.filename import extract_filename_candidate
from ..metadata.parse import DateFormatSpec, parse_metadata_date
from ..models import Candidate, Source

# Returns the raw string value of a metadata property for the current file
PropertyLookup = Callable[[str], Optional[str]]


def resolve_metadata_candidate(lookup: PropertyLookup,
                               formats: Dict[str, DateFormatSpec],
                               debug_raw: bool = False) -> Optional[Candidate]:
    """
    Tries each metadata property in priority order; the first one that
    parses wins.
    """
    for key in config.METADATA_PRIORITY:
        fmt = formats.get(key)
        if fmt is None:
            continue

        raw = lookup(key)
        if debug_raw:
            logging.info(f"  raw {key}: {raw!r}")

        value = parse_metadata_date(raw, fmt)
        if value is not None:
            return Candidate(Source.METADATA, value)
    return None


def resolve_candidate(path: Path,
                      lookup: PropertyLookup,
                      formats: Dict[str, DateFormatSpec],
                      debug_raw: bool = False) -> Optional[Candidate]:
    """
    Metadata first, filename as fallback. The filename is not looked at
    when metadata produced a candidate.

    Raises InvalidFilenameDateError from the filename extractor.
    """
    candidate = resolve_metadata_candidate(lookup, formats, debug_raw)
    if candidate is not None:
        return candidate
    return extract_filename_candidate(path.name)
