import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import config
from .core import TimestampFixerApp
from .exceptions import TimestampFixerError
from .metadata.extract import PROVIDERS, create_provider


def setup_logging(log_file: Optional[Path], verbose: bool):
    """Sets up logging to the console and, optionally, a log file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format=config.LOG_FORMAT,
        handlers=handlers
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Media Timestamp Fixer: restore creation/modification times from metadata or WhatsApp style filenames"
    )

    p.add_argument("root", type=Path, help="Directory to process (recursively)")

    p.add_argument("--simulate-only", action=argparse.BooleanOptionalAction, default=True,
                   help="Only report what would change (default). Use --no-simulate-only to write timestamps")
    p.add_argument("--debug-metadata-indices", action="store_true",
                   help="List the metadata properties of the first file and exit")
    p.add_argument("--debug-raw-parsing", action="store_true",
                   help="Log raw metadata strings before they are parsed")

    p.add_argument("--provider", choices=["auto", *PROVIDERS], default="auto",
                   help="Metadata source: Windows Shell or exifread/pymediainfo (default: auto)")
    p.add_argument("--report-csv", type=Path, default=None, help="Write a per-file CSV report")
    p.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    root = args.root.resolve()

    setup_logging(args.log_file, args.verbose)

    if not root.is_dir():
        logging.error(f"Root directory not found or not a directory: {root}")
        sys.exit(1)

    logging.info("=== Media Timestamp Fixer Started ===")
    logging.info(f"Root: {root}")

    try:
        app = TimestampFixerApp(create_provider(args.provider))
    except TimestampFixerError as e:
        logging.error(str(e))
        sys.exit(1)

    try:
        if args.debug_metadata_indices:
            app.dump_metadata_properties(root)
            sys.exit(0)

        summary = app.run(
            root=root,
            simulate_only=args.simulate_only,
            debug_raw_parsing=args.debug_raw_parsing,
            report_csv=args.report_csv,
        )
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(1)
    except Exception:
        logging.exception("Fatal error during processing.")
        sys.exit(1)

    sys.exit(1 if summary.failures else 0)


if __name__ == "__main__":
    main()
