"""
Album image pipeline for the photo portfolio.

Two independent batch jobs:
    1. Process: sequence new originals per album, generate resized WebP
       variants and EXIF sidecars, and record them in the album manifest
    2. Sync: emit idempotent album insert statements as a wrangler script
       and a raw SQL file

Both jobs communicate only through the generated tree on disk.
"""

__version__ = "1.0.0"

from .config import PipelineConfig
from .album_manifest import AlbumManifest
from .variant_generator import VariantSpec, VariantGenerator, VARIANTS
from .metadata_reader import ImageMetadata, MetadataReader
from .sidecar import Sidecar
from .run_log import RunStatus, ProcessingLog, SyncLog
from .processing_progress import ProcessingProgress
from .processor import AlbumProcessor
from .statements import AlbumStatement
from .sync_generator import AlbumSyncGenerator
from .album_stats import AlbumStats
from .reporter import Reporter

__all__ = [
    "PipelineConfig",
    "AlbumManifest",
    "VariantSpec",
    "VariantGenerator",
    "VARIANTS",
    "ImageMetadata",
    "MetadataReader",
    "Sidecar",
    "RunStatus",
    "ProcessingLog",
    "SyncLog",
    "ProcessingProgress",
    "AlbumProcessor",
    "AlbumStatement",
    "AlbumSyncGenerator",
    "AlbumStats",
    "Reporter",
]
