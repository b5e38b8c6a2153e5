"""
RunLog - Per-invocation audit record for the processor and sync jobs.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .fsutil import write_json_atomic

# Characters replaced in filename timestamps.
FILENAME_UNSAFE = re.compile(r'[/,: ]')


class RunStatus(str, Enum):
    """Final status of a job run."""
    SUCCESS = 'SUCCESS'
    PARTIAL = 'PARTIAL'
    FAILED = 'FAILED'
    NO_CHANGES = 'NO_CHANGES'


def current_time(tz: Optional[tzinfo] = None) -> datetime:
    """Timezone-aware now, in tz or local time."""
    return datetime.now(tz).astimezone(tz)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 timestamp with seconds precision."""
    return moment.isoformat(timespec='seconds')


def filename_timestamp(moment: datetime) -> str:
    """
    Filename-safe timestamp.

    Formats as 'YYYY-MM-DD HH:MM:SS' and replaces every '/', ',', ':'
    and space with '_', e.g. '2026-10-19_13_05_42'.
    """
    return FILENAME_UNSAFE.sub('_', moment.strftime('%Y-%m-%d %H:%M:%S'))


def compression_ratio(original_bytes: int, variant_bytes: int) -> Optional[float]:
    """1 - (variant bytes / original bytes), or None for an empty original."""
    if original_bytes <= 0:
        return None
    return round(1 - (variant_bytes / original_bytes), 4)


@dataclass
class RunLog:
    """
    Accumulator for one job run, persisted once when the run ends.

    Attributes:
        tz: Timezone for timestamps (None = local time)
        started: When the run started
        finished: When the run finished (None while running)
        status: Final status (None while running)
        errors: Human-readable error messages
        path: Where the log was saved (None until saved)
    """
    tz: Optional[tzinfo] = field(default=None, repr=False)
    started: Optional[datetime] = None
    finished: Optional[datetime] = None
    status: Optional[RunStatus] = None
    errors: List[str] = field(default_factory=list)
    path: Optional[Path] = None

    FILE_PREFIX = 'run'

    def __post_init__(self):
        if self.started is None:
            self.started = current_time(self.tz)

    def add_error(self, message: str) -> None:
        """Record a non-fatal error."""
        self.errors.append(message)

    def fail(self, message: str) -> None:
        """Record a fatal error; the run ends with FAILED."""
        self.errors.append(message)
        self.status = RunStatus.FAILED

    def finish(self, status: Optional[RunStatus] = None) -> None:
        """
        Mark the run finished.

        An explicit status wins, then any status already set (FAILED),
        otherwise PARTIAL when errors were recorded and SUCCESS when not.
        """
        self.finished = current_time(self.tz)
        if status is not None:
            self.status = status
        elif self.status is None:
            self.status = RunStatus.PARTIAL if self.errors else RunStatus.SUCCESS

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed run time in seconds."""
        end = self.finished or current_time(self.tz)
        return (end - self.started).total_seconds()

    @property
    def succeeded(self) -> bool:
        return self.status in (RunStatus.SUCCESS, RunStatus.NO_CHANGES)

    def counts(self) -> dict:
        """Job-specific counters included in the saved log."""
        return {}

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            'started_at': format_timestamp(self.started),
            'finished_at': format_timestamp(self.finished) if self.finished else None,
            'status': self.status.value if self.status else None,
        }
        data.update(self.counts())
        data['errors'] = list(self.errors)
        return data

    def save(self, directory: Path) -> Path:
        """
        Save the log as <prefix>_<start timestamp>.json in directory.

        If a log from the same second already exists, a counter is appended
        (<prefix>_<timestamp>_1.json, ...) so earlier logs are kept.
        """
        if self.finished is None:
            self.finish()
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        stem = f"{self.FILE_PREFIX}_{filename_timestamp(self.started)}"
        path = directory / f"{stem}.json"
        counter = 1
        while path.exists():
            path = directory / f"{stem}_{counter}.json"
            counter += 1
        write_json_atomic(path, self.to_dict())
        self.path = path
        return path


@dataclass
class ProcessingLog(RunLog):
    """
    Run log for the album processor.

    Attributes:
        albums: Albums visited
        total_images: Original images discovered
        processed: Newly sequenced images processed without error
        skipped: Images already present in their manifest
        failed: Newly sequenced images whose processing raised
        compression: Per-file compression records
    """
    albums: int = 0
    total_images: int = 0
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    compression: List[dict] = field(default_factory=list)

    FILE_PREFIX = 'process'

    def record_compression(
        self,
        album: str,
        filename: str,
        sequence: str,
        original_bytes: int,
        variant_bytes: int
    ) -> Optional[float]:
        """Record the compression achieved for one processed file."""
        ratio = compression_ratio(original_bytes, variant_bytes)
        self.compression.append({
            'album': album,
            'file': filename,
            'sequence': sequence,
            'original_bytes': original_bytes,
            'variant_bytes': variant_bytes,
            'ratio': ratio,
        })
        return ratio

    def counts(self) -> dict:
        return {
            'albums': self.albums,
            'total_images': self.total_images,
            'processed': self.processed,
            'skipped': self.skipped,
            'failed': self.failed,
            'compression': list(self.compression),
        }


@dataclass
class SyncLog(RunLog):
    """
    Run log for the sync generator.

    Attributes:
        total_rows: Statements built
        successful_inserts: Statements written to the sync artifacts
        failed_inserts: Albums whose statement could not be built
    """
    total_rows: int = 0
    successful_inserts: int = 0
    failed_inserts: int = 0

    FILE_PREFIX = 'sync'

    def counts(self) -> dict:
        return {
            'total_rows': self.total_rows,
            'successful_inserts': self.successful_inserts,
            'failed_inserts': self.failed_inserts,
        }
