import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from . import config
from .models import BatchSummary, FileResult, Outcome


def fmt_ts(dt: Optional[datetime]) -> str:
    return dt.strftime(config.TIMESTAMP_DISPLAY_FORMAT) if dt else ""


def describe_result(result: FileResult) -> str:
    """One human readable line for a processed file."""
    name = result.path.name
    decision = result.decision

    if result.outcome in (Outcome.NO_EVIDENCE, Outcome.READ_FAILED,
                          Outcome.INVALID_FILENAME_DATE, Outcome.PROCESS_FAILED):
        return f"{name}: {result.outcome.value}" + (f" ({result.message})" if result.message else "")

    source = decision.source.value if decision.source else "-"
    if result.outcome == Outcome.ALREADY_CORRECT:
        return f"{name}: already correct ({source} {fmt_ts(result.candidate.value)})"

    changes = []
    if decision.target_creation is not None:
        changes.append(f"created {fmt_ts(result.creation_before)} -> {fmt_ts(decision.target_creation)}")
    if decision.target_modification is not None:
        changes.append(f"modified {fmt_ts(result.modification_before)} -> {fmt_ts(decision.target_modification)}")

    line = f"{name} [{source}]: " + ", ".join(changes)
    if result.outcome == Outcome.APPLY_FAILED:
        line += f" FAILED: {result.message}"
    return line


def log_summary(summary: BatchSummary, simulate_only: bool):
    logging.info(f"Processed {summary.total} files.")
    for outcome in Outcome:
        count = summary.counts[outcome]
        if count:
            logging.info(f"  {outcome.value}: {count}")
    if simulate_only and summary.counts[Outcome.SIMULATED]:
        logging.info("Simulation only, nothing was written. Re-run with --no-simulate-only to apply.")


class ReportGenerator:
    """Writes one CSV row per processed file."""

    HEADERS = [
        "Path",
        "Outcome",
        "Source",
        "Candidate",
        "Created (Before)",
        "Modified (Before)",
        "Created (Target)",
        "Modified (Target)",
        "Notes",
    ]

    def write(self, results: Iterable[FileResult], output_csv: Path) -> int:
        logging.info(f"Writing report -> {output_csv}")
        count = 0
        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(self.HEADERS)
            for result in results:
                writer.writerow(self._row(result))
                count += 1
        return count

    def _row(self, result: FileResult) -> list:
        decision = result.decision
        return [
            str(result.path),
            result.outcome.value,
            decision.source.value if decision.source else "",
            fmt_ts(result.candidate.value) if result.candidate else "",
            fmt_ts(result.creation_before),
            fmt_ts(result.modification_before),
            fmt_ts(decision.target_creation),
            fmt_ts(decision.target_modification),
            result.message,
        ]
