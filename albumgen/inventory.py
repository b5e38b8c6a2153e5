"""
Inventory - Read-only scan of the generated tree against album manifests.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .album_manifest import AlbumManifest
from .album_stats import AlbumStats
from .exceptions import ManifestError
from .sidecar import SIDECAR_FILENAME
from .sync_generator import list_generated_albums
from .variant_generator import VARIANTS, VariantSpec


def scan_album(
    generated_dir: Path,
    album: str,
    variants: Sequence[VariantSpec] = VARIANTS
) -> AlbumStats:
    """
    Compare one album's manifest with the files present on disk.

    Raises:
        ManifestError: If the album's manifest is invalid
    """
    manifest = AlbumManifest.load(generated_dir, album)
    stats = AlbumStats(name=album, manifest_entries=len(manifest))

    for sequence in sorted(manifest.entries.values()):
        seq_dir = Path(generated_dir) / album / sequence
        complete = True
        for spec in variants:
            path = seq_dir / spec.filename
            if path.exists():
                stats.variant_bytes += path.stat().st_size
            else:
                complete = False
                stats.missing_variants += 1
                stats.missing.append(f"{sequence}/{spec.filename}")
        if not (seq_dir / SIDECAR_FILENAME).exists():
            stats.missing_sidecars += 1
            stats.missing.append(f"{sequence}/{SIDECAR_FILENAME}")
        if complete:
            stats.complete_images += 1

    return stats


def scan_generated(
    generated_dir: Path,
    albums: Optional[List[str]] = None,
    variants: Sequence[VariantSpec] = VARIANTS,
    logger: Optional[logging.Logger] = None
) -> List[AlbumStats]:
    """
    Scan every album (or only those named) in the generated tree.

    Albums whose manifest cannot be read are returned with error set.
    """
    logger = logger or logging.getLogger(__name__)
    results = []
    for album in list_generated_albums(generated_dir):
        if albums and album not in albums:
            continue
        try:
            results.append(scan_album(generated_dir, album, variants))
        except (OSError, ManifestError) as e:
            logger.warning(f"Could not inspect album {album}: {e}")
            results.append(AlbumStats(name=album, error=str(e)))
    return results
