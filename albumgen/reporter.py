"""
Reporter - Human-readable reports on the generated tree.
"""

import json
import logging
import sys
from typing import List, Optional, TextIO

from .album_stats import AlbumStats


class Reporter:
    """
    Generates human-readable reports from album statistics.
    """

    def __init__(
        self,
        output: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reporter.

        Args:
            output: Output stream (default: stdout)
            logger: Optional logger instance
        """
        self.output = output or sys.stdout
        self.logger = logger or logging.getLogger(__name__)

    def _print(self, text: str = "") -> None:
        """Print to output stream."""
        print(text, file=self.output)

    def _format_bytes(self, bytes_val: float) -> str:
        """Format bytes as human-readable string."""
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} PB"

    def report_summary(self, albums: List[AlbumStats]) -> None:
        """Generate a summary report."""
        self._print("=" * 70)
        self._print("GENERATED ALBUMS SUMMARY")
        self._print("=" * 70)
        self._print()

        if not albums:
            self._print("No albums found.")
            self._print()
            return

        self._print(f"  {'Album':<20} {'Images':>8} {'Complete':>10} {'Missing':>8} "
                    f"{'No Meta':>8} {'Size':>12}")
        self._print(f"  {'-'*20} {'-'*8} {'-'*10} {'-'*8} {'-'*8} {'-'*12}")

        for stats in albums:
            if stats.error:
                self._print(f"  {stats.name:<20} ERROR: {stats.error}")
                continue
            self._print(
                f"  {stats.name:<20} {stats.manifest_entries:>8,} "
                f"{stats.completeness:>9.1f}% {stats.missing_variants:>8,} "
                f"{stats.missing_sidecars:>8,} {self._format_bytes(stats.variant_bytes):>12}"
            )

        total_images = sum(s.manifest_entries for s in albums)
        total_missing = sum(s.missing_variants for s in albums)
        total_bytes = sum(s.variant_bytes for s in albums)
        self._print()
        self._print(f"Total Albums:           {len(albums):>10,}")
        self._print(f"Total Images:           {total_images:>10,}")
        self._print(f"Missing Variants:       {total_missing:>10,}")
        self._print(f"Variant Storage:        {self._format_bytes(total_bytes):>10}")
        self._print()

        if total_missing:
            self._print("⚠️  Some variants are missing.")
            self._print("   Run 'report --type missing' to list them.")
            self._print()

    def report_missing(self, albums: List[AlbumStats]) -> None:
        """List every missing variant and sidecar."""
        self._print("=" * 70)
        self._print("MISSING OUTPUTS")
        self._print("=" * 70)
        self._print()

        found = False
        for stats in albums:
            if not stats.missing:
                continue
            found = True
            self._print(f"{stats.name}:")
            for rel_path in stats.missing:
                self._print(f"  {stats.name}/{rel_path}")
            self._print()

        if not found:
            self._print("Nothing missing.")
            self._print()

    def report_json(self, albums: List[AlbumStats]) -> None:
        """Dump album statistics as JSON."""
        self._print(json.dumps([s.to_dict() for s in albums], indent=2))
