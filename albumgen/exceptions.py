"""
Exceptions raised by the album pipeline.
"""


class AlbumPipelineError(Exception):
    """Base exception for all album pipeline errors."""


class MissingInputError(AlbumPipelineError):
    """A required input directory does not exist. Aborts the whole run."""


class ManifestError(AlbumPipelineError):
    """An album manifest could not be read or holds invalid entries."""


class ItemError(AlbumPipelineError):
    """Processing a single original image failed."""


class EncodeError(ItemError):
    """A variant could not be rendered from the source image."""


class MetadataError(ItemError):
    """Metadata could not be decoded, or the image carries no EXIF data."""
