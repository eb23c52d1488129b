from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional


class Source(Enum):
    METADATA = "metadata"
    FILENAME = "filename"


@dataclass(frozen=True)
class Candidate:
    """
    A timestamp derived from one evidence source.
    Metadata candidates are precise instants; filename candidates only
    carry a trustworthy date plus a synthetic time-of-day.
    """
    source: Source
    value: datetime


@dataclass(frozen=True)
class Decision:
    """
    Reconciler output. A target of None means "leave this attribute as-is".
    """
    target_creation: Optional[datetime] = None
    target_modification: Optional[datetime] = None
    source: Optional[Source] = None

    @classmethod
    def skip(cls) -> "Decision":
        """Decision for a file with no evidence at all."""
        return cls(None, None, None)

    @property
    def needs_update(self) -> bool:
        return self.target_creation is not None or self.target_modification is not None


@dataclass
class MediaFile:
    """
    A file found during a scan together with its current timestamps.
    """
    path: Path
    creation_time: datetime
    modification_time: datetime


class Outcome(Enum):
    NO_EVIDENCE = "no evidence"
    INVALID_FILENAME_DATE = "invalid filename date"
    ALREADY_CORRECT = "already correct"
    SIMULATED = "simulated"
    UPDATED = "updated"
    APPLY_FAILED = "apply failed"
    READ_FAILED = "read failed"
    PROCESS_FAILED = "failed"


@dataclass
class FileResult:
    path: Path
    outcome: Outcome
    decision: Decision = field(default_factory=Decision.skip)
    candidate: Optional[Candidate] = None
    creation_before: Optional[datetime] = None
    modification_before: Optional[datetime] = None
    message: str = ""


@dataclass
class BatchSummary:
    counts: Counter = field(default_factory=Counter)
    results: list = field(default_factory=list)

    def add(self, result: FileResult):
        self.counts[result.outcome] += 1
        self.results.append(result)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def failures(self) -> int:
        return (self.counts[Outcome.APPLY_FAILED]
                + self.counts[Outcome.READ_FAILED]
                + self.counts[Outcome.PROCESS_FAILED])
