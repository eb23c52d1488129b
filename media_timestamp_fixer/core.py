import logging
from pathlib import Path
from typing import Dict, List, Optional

from tqdm import tqdm

from .exceptions import InvalidFilenameDateError, MetadataProviderError, TimestampWriteError
from .models import BatchSummary, Decision, FileResult, Outcome
from .reconcile.candidates import PropertyLookup, resolve_candidate
from .reconcile.reconciler import reconcile
from .reporting import ReportGenerator, describe_result, log_summary
from .scanning.filesystem import DiskScanner
from .scanning.filetimes import FileTimeAccessor


class FolderCache:
    """Provider folder handles, opened lazily and reused per directory."""

    def __init__(self, provider):
        self.provider = provider
        self._handles: Dict[Path, object] = {}

    def get(self, directory: Path):
        if directory not in self._handles:
            self._handles[directory] = self.provider.open_folder(directory)
        return self._handles[directory]


class TimestampFixerApp:
    def __init__(self, provider, accessor: Optional[FileTimeAccessor] = None, scanner: Optional[DiskScanner] = None):
        self.provider = provider
        self.accessor = accessor or FileTimeAccessor()
        self.scanner = scanner or DiskScanner()
        self.folders = FolderCache(provider)

    def run(self,
            root: Path,
            simulate_only: bool = True,
            debug_raw_parsing: bool = False,
            report_csv: Optional[Path] = None) -> BatchSummary:
        """
        Repairs timestamps for every media file under root.
        1. Read current creation/modification time
        2. Resolve a candidate (metadata, then filename)
        3. Reconcile
        4. Apply, or only report in simulation mode
        """
        logging.info(f"Scanning {root} (Simulate={simulate_only})...")
        files = list(self.scanner.iter_files(root))

        summary = BatchSummary()
        for path in tqdm(files, desc="Checking"):
            try:
                result = self.process_file(path, simulate_only, debug_raw_parsing)
            except Exception as e:
                logging.exception(f"Failed to process {path}")
                result = FileResult(path, Outcome.PROCESS_FAILED, message=str(e))
            summary.add(result)

        log_summary(summary, simulate_only)

        if report_csv:
            ReportGenerator().write(summary.results, report_csv)
        return summary

    def process_file(self, path: Path, simulate_only: bool = True, debug_raw_parsing: bool = False) -> FileResult:
        try:
            media = self.accessor.read(path)
        except OSError as e:
            logging.error(f"Failed to read timestamps of {path}: {e}")
            return FileResult(path, Outcome.READ_FAILED, message=str(e))

        if debug_raw_parsing:
            logging.info(f"{path}:")

        try:
            candidate = resolve_candidate(path, self._lookup_for(path), self.provider.date_formats, debug_raw_parsing)
        except InvalidFilenameDateError as e:
            logging.warning(f"Skipping {path}: {e}")
            return FileResult(path, Outcome.INVALID_FILENAME_DATE,
                              creation_before=media.creation_time,
                              modification_before=media.modification_time,
                              message=str(e))

        if candidate is None:
            logging.debug(f"No date evidence for {path}")
            return FileResult(path, Outcome.NO_EVIDENCE, Decision.skip(),
                              creation_before=media.creation_time,
                              modification_before=media.modification_time)

        decision = reconcile(candidate, media.creation_time, media.modification_time)
        result = FileResult(path, Outcome.ALREADY_CORRECT, decision, candidate,
                            creation_before=media.creation_time,
                            modification_before=media.modification_time)

        if not decision.needs_update:
            logging.info(describe_result(result))
            return result

        if simulate_only:
            result.outcome = Outcome.SIMULATED
            logging.info(f"[DRY RUN] {describe_result(result)}")
            return result

        try:
            self.accessor.apply(path, decision)
        except TimestampWriteError as e:
            result.outcome = Outcome.APPLY_FAILED
            result.message = str(e)
            logging.error(describe_result(result))
            return result

        result.outcome = Outcome.UPDATED
        logging.info(describe_result(result))
        return result

    def dump_metadata_properties(self, root: Path) -> List[tuple]:
        """Logs every property the provider exposes for the first media file."""
        first = self.scanner.first_file(root)
        if first is None:
            logging.warning(f"No media files found under {root}")
            return []

        rows = self.provider.list_properties(self.folders.get(first.parent), first)
        logging.info(f"Metadata properties of {first}:")
        for identifier, name, value in rows:
            logging.info(f"  [{identifier}] {name}: {value}")
        return rows

    def _lookup_for(self, path: Path) -> PropertyLookup:
        """
        Binds the provider to one file. Provider failures count as missing
        metadata so the filename can still be used.
        """
        try:
            folder = self.folders.get(path.parent)
        except MetadataProviderError as e:
            logging.debug(f"No metadata folder for {path.parent}: {e}")
            return lambda key: None

        def lookup(key: str) -> Optional[str]:
            try:
                return self.provider.get_property(folder, path, key)
            except Exception as e:
                logging.debug(f"Metadata lookup '{key}' failed for {path}: {e}")
                return None

        return lookup
