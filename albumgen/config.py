"""
PipelineConfig - Filesystem layout and settings shared by both jobs.
"""

import os
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


DEFAULT_DB_NAME = 'portfolio-db'


@dataclass
class PipelineConfig:
    """
    Paths and settings for the album processor and sync generator.

    Attributes:
        root: Base directory that relative paths resolve against
        originals_dir: Directory holding one subdirectory per album
        generated_dir: Directory receiving manifests, variants and sidecars
        logs_dir: Directory receiving run logs (one subdirectory per job)
        db_sync_dir: Directory receiving raw SQL statement files
        sync_script: Path of the generated executable sync script
        db_name: Target database name used in sync commands
        timezone: IANA timezone for timestamps (None = local time)
    """
    root: str = '.'
    originals_dir: str = 'images/originals'
    generated_dir: str = 'images/generated'
    logs_dir: str = 'logs'
    db_sync_dir: str = 'db-sync'
    sync_script: str = 'sync-db.sh'
    db_name: str = DEFAULT_DB_NAME
    timezone: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'PipelineConfig':
        """Create configuration from environment variables."""
        defaults = cls()
        return cls(
            root=os.getenv('ALBUMGEN_ROOT', defaults.root),
            originals_dir=os.getenv('ORIGINALS_DIR', defaults.originals_dir),
            generated_dir=os.getenv('GENERATED_DIR', defaults.generated_dir),
            logs_dir=os.getenv('LOGS_DIR', defaults.logs_dir),
            db_sync_dir=os.getenv('DB_SYNC_DIR', defaults.db_sync_dir),
            sync_script=os.getenv('SYNC_SCRIPT', defaults.sync_script),
            db_name=os.getenv('DB_NAME') or DEFAULT_DB_NAME,
            timezone=os.getenv('ALBUMGEN_TIMEZONE') or None,
        )

    def validate(self) -> List[str]:
        """Validate configuration, returning a list of errors."""
        errors = []
        if not self.db_name.strip():
            errors.append("Database name must not be empty")
        if self.timezone:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError):
                errors.append(f"Unknown timezone: {self.timezone}")
        return errors

    def resolve(self, path: str) -> Path:
        """Resolve a configured path against the root directory."""
        p = Path(path)
        if p.is_absolute():
            return p
        return Path(self.root) / p

    @property
    def originals_path(self) -> Path:
        return self.resolve(self.originals_dir)

    @property
    def generated_path(self) -> Path:
        return self.resolve(self.generated_dir)

    @property
    def processing_log_path(self) -> Path:
        """Directory for album processor run logs."""
        return self.resolve(self.logs_dir) / 'image-processing'

    @property
    def sync_log_path(self) -> Path:
        """Directory for sync generator run logs."""
        return self.resolve(self.logs_dir) / 'database-sync'

    @property
    def db_sync_path(self) -> Path:
        return self.resolve(self.db_sync_dir)

    @property
    def sync_script_path(self) -> Path:
        return self.resolve(self.sync_script)

    @property
    def tz(self) -> Optional[tzinfo]:
        """Timezone object for timestamps, or None for local time."""
        return ZoneInfo(self.timezone) if self.timezone else None
