"""
AlbumSyncGenerator - Emits database sync commands for generated albums.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from .config import PipelineConfig
from .exceptions import MissingInputError
from .fsutil import write_bytes_atomic
from .run_log import RunStatus, SyncLog, filename_timestamp
from .statements import AlbumStatement, wrangler_command


SCRIPT_MODE = 0o755


def list_generated_albums(generated_dir: Path) -> List[str]:
    """Immediate subdirectories of the generated tree, sorted."""
    return sorted(entry.name for entry in Path(generated_dir).iterdir() if entry.is_dir())


class AlbumSyncGenerator:
    """
    Builds one insert-if-absent statement per generated album and writes
    them as an executable wrangler script and a raw SQL file.
    """

    def __init__(
        self,
        config: PipelineConfig,
        dry_run: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize sync generator.

        Args:
            config: Pipeline configuration
            dry_run: If True, print the SQL instead of writing artifacts or logs
            logger: Optional logger instance
        """
        self.config = config
        self.dry_run = dry_run
        self.logger = logger or logging.getLogger(__name__)

    def run(self) -> SyncLog:
        """
        Generate sync artifacts for every album in the generated tree.

        Returns:
            The run log, already persisted unless in dry-run mode
        """
        log = SyncLog(tz=self.config.tz)
        self.logger.info("Generating database sync commands...")

        try:
            self._check_preconditions()
            slugs = list_generated_albums(self.config.generated_path)
        except (MissingInputError, OSError) as e:
            self.logger.error(str(e))
            log.fail(str(e))
            self._persist_log(log)
            return log

        statements = self.build_statements(slugs, log)

        if not statements:
            if log.errors:
                log.finish(RunStatus.FAILED)
            else:
                self.logger.info("No albums to sync")
                log.finish(RunStatus.NO_CHANGES)
            self._persist_log(log)
            return log

        if self.dry_run:
            for sql in statements:
                print(sql)
            log.successful_inserts = len(statements)
            log.finish()
            return log

        timestamp = filename_timestamp(log.started)
        try:
            script_path = self.write_script(statements, timestamp)
            sql_path = self.write_sql(statements, timestamp)
        except OSError as e:
            message = f"Failed to write sync artifacts: {e}"
            self.logger.error(message)
            log.fail(message)
            self._persist_log(log)
            return log

        log.successful_inserts = len(statements)
        log.finish()
        self._persist_log(log)

        self.logger.info(f"Generated {len(statements)} album inserts")
        self.logger.info(f"SQL saved to {sql_path}")
        self.logger.info(f"Run: {script_path}")
        return log

    def _check_preconditions(self) -> None:
        if not self.config.generated_path.is_dir():
            raise MissingInputError(f"{self.config.generated_path} directory not found")

    def build_statements(self, slugs: List[str], log: SyncLog) -> List[str]:
        """Render one SQL statement per slug, recording any that fail."""
        statements = []
        for slug in slugs:
            try:
                statements.append(AlbumStatement.for_slug(slug).to_sql())
                log.total_rows += 1
            except ValueError as e:
                message = f"Failed to create album insert for {slug!r}: {e}"
                self.logger.error(message)
                log.failed_inserts += 1
                log.add_error(message)
        return statements

    def render_script(self, statements: List[str], timestamp: str) -> str:
        """Bash script running each statement through wrangler."""
        commands = [wrangler_command(self.config.db_name, sql) for sql in statements]
        return (
            "#!/bin/bash\n"
            f"# Database sync script - {timestamp}\n\n"
            + "\n".join(commands)
            + '\n\necho "✅ Database sync completed"\n'
        )

    def write_script(self, statements: List[str], timestamp: str) -> Path:
        path = self.config.sync_script_path
        path.parent.mkdir(parents=True, exist_ok=True)
        write_bytes_atomic(path, self.render_script(statements, timestamp).encode('utf-8'))
        os.chmod(path, SCRIPT_MODE)
        return path

    def write_sql(self, statements: List[str], timestamp: str) -> Path:
        directory = self.config.db_sync_path
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"sync_{timestamp}.sql"
        write_bytes_atomic(path, "\n".join(statements).encode('utf-8'))
        return path

    def _persist_log(self, log: SyncLog) -> None:
        if self.dry_run:
            return
        path = log.save(self.config.sync_log_path)
        self.logger.info(f"Run log saved to: {path}")
