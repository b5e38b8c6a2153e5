"""
AlbumProcessor - Sequences new originals and generates their variants.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .album_manifest import AlbumManifest
from .config import PipelineConfig
from .exceptions import ManifestError, MetadataError, MissingInputError
from .fsutil import write_bytes_atomic
from .metadata_reader import MetadataReader
from .processing_progress import ProcessingProgress
from .run_log import ProcessingLog
from .sidecar import SIDECAR_FILENAME, Sidecar
from .variant_generator import VARIANTS, VariantGenerator, VariantSpec


ALLOWED_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.webp')


def is_image_file(filename: str) -> bool:
    """True if filename has an allowed image extension (any case)."""
    return os.path.splitext(filename)[1].lower() in ALLOWED_EXTENSIONS


def list_albums(originals_dir: Path) -> List[str]:
    """Album directory names under originals_dir, sorted."""
    return sorted(entry.name for entry in Path(originals_dir).iterdir() if entry.is_dir())


def list_images(album_dir: Path) -> List[str]:
    """Image filenames in album_dir, sorted so sequencing is deterministic."""
    return sorted(
        entry.name for entry in Path(album_dir).iterdir()
        if entry.is_file() and is_image_file(entry.name)
    )


class AlbumProcessor:
    """
    Walks the originals tree and processes every image not yet in its
    album's manifest.

    Each new image gets the next sequence number, its variants are written
    to generated/<album>/<seq>/ (existing files are left alone) and a
    meta.json sidecar is written if missing. A failure on one image is
    recorded and processing moves on.
    """

    def __init__(
        self,
        config: PipelineConfig,
        variant_generator: Optional[VariantGenerator] = None,
        metadata_reader: Optional[MetadataReader] = None,
        variants: Sequence[VariantSpec] = VARIANTS,
        dry_run: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize processor.

        Args:
            config: Pipeline configuration
            variant_generator: Renders variants (default: VariantGenerator)
            metadata_reader: Decodes metadata (default: MetadataReader)
            variants: Variants to produce for each image
            dry_run: If True, assign sequences in memory only and write nothing
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.variant_gen = variant_generator or VariantGenerator(logger=self.logger)
        self.metadata_reader = metadata_reader or MetadataReader(logger=self.logger)
        self.variants = tuple(variants)
        self.dry_run = dry_run

    @property
    def originals_dir(self) -> Path:
        return self.config.originals_path

    @property
    def generated_dir(self) -> Path:
        return self.config.generated_path

    def run(
        self,
        albums: Optional[Iterable[str]] = None,
        progress: Optional[ProcessingProgress] = None
    ) -> ProcessingLog:
        """
        Process all albums (or only those named in albums).

        Args:
            albums: Optional album names to restrict the run to
            progress: Optional progress tracker

        Returns:
            The run log, already persisted unless in dry-run mode
        """
        log = ProcessingLog(tz=self.config.tz)
        mode_str = " [DRY RUN]" if self.dry_run else ""
        self.logger.info(f"Image processing started{mode_str}")

        try:
            self._check_preconditions()
            album_names = self._select_albums(albums, log)
        except (MissingInputError, OSError) as e:
            self.logger.error(str(e))
            log.fail(str(e))
            self._persist_log(log)
            return log

        for album in album_names:
            self._process_album(album, log, progress)

        log.finish()
        self.logger.info(
            f"Image processing completed: {log.processed} processed, "
            f"{log.skipped} skipped, {log.failed} failed, "
            f"{len(log.errors)} errors ({log.elapsed_seconds:.1f}s)"
        )
        self._persist_log(log)
        return log

    def _check_preconditions(self) -> None:
        if not self.originals_dir.is_dir():
            raise MissingInputError(f"{self.originals_dir} does not exist")

    def _select_albums(self, albums: Optional[Iterable[str]], log: ProcessingLog) -> List[str]:
        available = list_albums(self.originals_dir)
        if albums is None:
            return available

        wanted = set(albums)
        for name in sorted(wanted - set(available)):
            message = f"Album not found: {name}"
            self.logger.error(message)
            log.add_error(message)
        return [name for name in available if name in wanted]

    def _process_album(
        self,
        album: str,
        log: ProcessingLog,
        progress: Optional[ProcessingProgress]
    ) -> None:
        """Process one album and persist its manifest."""
        try:
            files = list_images(self.originals_dir / album)
            manifest = AlbumManifest.load(self.generated_dir, album)
        except (OSError, ManifestError) as e:
            message = f"Skipping album {album}: {e}"
            self.logger.error(message)
            log.add_error(message)
            return

        log.albums += 1
        log.total_images += len(files)

        if progress:
            progress.on_album_start(album, len(files))
        else:
            self.logger.info(f"Album: {album}")

        for filename in files:
            if filename in manifest:
                log.skipped += 1
                sequence = manifest.sequence_for(filename)
                if progress:
                    progress.on_file_skipped(album, filename, sequence)
                else:
                    self.logger.debug(f"Skipping {filename} (already processed as {sequence})")
                continue

            # Reserved before processing so a failure below keeps the number
            sequence = manifest.assign(filename)

            if self.dry_run:
                log.processed += 1
                if progress:
                    progress.on_dry_run(album, filename, sequence)
                else:
                    self.logger.info(f"[DRY RUN] Would process: {album}/{sequence} <- {filename}")
                continue

            self._process_file(album, filename, sequence, log, progress)

        if not self.dry_run and manifest.needs_save:
            try:
                manifest.save(self.generated_dir)
            except OSError as e:
                message = f"Failed to save manifest for {album}: {e}"
                self.logger.error(message)
                log.add_error(message)

        if progress:
            progress.on_album_complete(album, log)

    def _process_file(
        self,
        album: str,
        filename: str,
        sequence: str,
        log: ProcessingLog,
        progress: Optional[ProcessingProgress]
    ) -> bool:
        """Process one file, recording rather than raising any error."""
        try:
            variant_bytes = self.process_image(album, filename, sequence, log)
        except Exception as e:
            message = f"Error processing {album}/{filename}: {e}"
            self.logger.error(message)
            log.failed += 1
            log.add_error(message)
            if progress:
                progress.on_file_processed(album, filename, sequence, success=False, error=str(e))
            return False

        log.processed += 1
        if progress:
            progress.on_file_processed(
                album, filename, sequence, success=True, variant_bytes=variant_bytes
            )
        else:
            self.logger.info(f"{album}/{sequence} <- {filename}")
        return True

    def process_image(
        self,
        album: str,
        filename: str,
        sequence: str,
        log: ProcessingLog
    ) -> int:
        """
        Generate missing variants and the sidecar for one original.

        Args:
            album: Album slug
            filename: Original filename within the album
            sequence: Sequence assigned to the original
            log: Run log receiving compression and sidecar errors

        Returns:
            Total size in bytes of the image's variants on disk
        """
        source = self.originals_dir / album / filename
        output_dir = self.generated_dir / album / sequence

        image_data = source.read_bytes()
        output_dir.mkdir(parents=True, exist_ok=True)

        for spec in self.variants:
            out_path = output_dir / spec.filename
            if out_path.exists():
                self.logger.debug(f"Variant exists, leaving it: {out_path}")
                continue
            self.logger.debug(f"Rendering {spec.name} ({spec.max_width}px, q{spec.quality}): {out_path}")
            write_bytes_atomic(out_path, self.variant_gen.render(image_data, spec))

        sidecar_path = output_dir / SIDECAR_FILENAME
        if not sidecar_path.exists():
            self._write_sidecar(album, filename, sequence, image_data, sidecar_path, log)

        variant_bytes = sum(
            (output_dir / spec.filename).stat().st_size
            for spec in self.variants
            if (output_dir / spec.filename).exists()
        )
        log.record_compression(album, filename, sequence, len(image_data), variant_bytes)
        return variant_bytes

    def _write_sidecar(
        self,
        album: str,
        filename: str,
        sequence: str,
        image_data: bytes,
        sidecar_path: Path,
        log: ProcessingLog
    ) -> None:
        """Write meta.json, or record why it could not be written."""
        try:
            metadata = self.metadata_reader.read(image_data)
            sidecar = Sidecar.from_metadata(metadata, album, sequence, filename)
        except MetadataError as e:
            message = f"Could not read EXIF for {album}/{filename}: {e}"
            self.logger.warning(message)
            log.add_error(message)
            return
        sidecar.save(sidecar_path)

    def _persist_log(self, log: ProcessingLog) -> None:
        if self.dry_run:
            return
        path = log.save(self.config.processing_log_path)
        self.logger.info(f"Run log saved to: {path}")
