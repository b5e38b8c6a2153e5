"""
ProcessingProgress - Per-file console output for the album processor.
"""

import logging
from typing import Optional

from .run_log import ProcessingLog


class ProcessingProgress:
    """
    Tracks and displays processing progress with optional per-file output.
    """

    def __init__(
        self,
        show_files: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            show_files: If True, print each file as it's processed
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.logger = logger or logging.getLogger(__name__)

    def on_album_start(self, album: str, image_count: int) -> None:
        """Called before an album's files are processed."""
        self.logger.info(f"Album: {album} ({image_count} images)")

    def on_file_processed(
        self,
        album: str,
        filename: str,
        sequence: str,
        success: bool,
        variant_bytes: Optional[int] = None,
        error: Optional[str] = None
    ) -> None:
        """
        Called when a newly sequenced file has been processed.

        Args:
            album: Album slug
            filename: Original filename
            sequence: Assigned sequence
            success: Whether processing succeeded
            variant_bytes: Total size of the file's variants (if success)
            error: Error message (if failed)
        """
        if not self.show_files:
            return
        if success:
            size_str = self._format_bytes(variant_bytes)
            print(f"  [OK] {album}/{sequence} <- {filename} ({size_str})")
        else:
            print(f"  [ERROR] {album}/{sequence} <- {filename}: {error or 'failed'}")

    def on_file_skipped(self, album: str, filename: str, sequence: str) -> None:
        """Called when a file already has a manifest entry."""
        if self.show_files:
            print(f"  [SKIP] {album}/{filename} -> already processed as {sequence}")

    def on_dry_run(self, album: str, filename: str, sequence: str) -> None:
        """Called in dry-run mode."""
        if self.show_files:
            print(f"  [DRY RUN] {album}/{sequence} <- {filename} (would process)")

    def on_album_complete(self, album: str, log: ProcessingLog) -> None:
        """Called after an album's manifest has been persisted."""
        self.logger.info(
            f"  Done {album}: {log.processed} processed, {log.skipped} skipped, "
            f"{log.failed} failed so far"
        )

    @staticmethod
    def _format_bytes(bytes_val: Optional[int]) -> str:
        """Format bytes as human-readable string."""
        if bytes_val is None:
            return "unknown"
        for unit in ['B', 'KB', 'MB', 'GB']:
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} TB"
