"""
AlbumStats - Output statistics for a single generated album.
"""

from dataclasses import dataclass, field, asdict
from typing import List, Optional


@dataclass
class AlbumStats:
    """
    Statistics for a single album in the generated tree.

    Attributes:
        name: Album slug
        manifest_entries: Originals recorded in the manifest
        complete_images: Entries with every variant present
        missing_variants: Variant files absent across all entries
        missing_sidecars: Entries without meta.json
        variant_bytes: Total size of present variant files
        missing: Relative paths of absent outputs (e.g. '003/thumb.webp')
        error: Why the album could not be inspected, if it couldn't
    """
    name: str
    manifest_entries: int = 0
    complete_images: int = 0
    missing_variants: int = 0
    missing_sidecars: int = 0
    variant_bytes: int = 0
    missing: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def completeness(self) -> float:
        """Percentage of manifest entries with every variant present."""
        if self.manifest_entries == 0:
            return 100.0
        return (self.complete_images / self.manifest_entries) * 100

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)
