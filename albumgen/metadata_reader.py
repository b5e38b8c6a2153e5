"""
MetadataReader - Decodes image dimensions, format and EXIF tags.
"""

import io
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from PIL import Image
from PIL.ExifTags import GPSTAGS, TAGS

from .exceptions import MetadataError


EXIF_IFD_TAG = 0x8769  # ExifOffset
GPS_IFD_TAG = 0x8825  # GPSInfo


@dataclass
class ImageMetadata:
    """
    Decoded metadata for one image.

    Attributes:
        width: Pixel width as stored
        height: Pixel height as stored
        format: Lower-case format name (e.g. 'jpeg'), if known
        orientation: EXIF orientation (1-8), if present
        exif: EXIF and GPS tags keyed by tag name (e.g. 'Make', 'GPSLatitude')
    """
    width: int
    height: int
    format: Optional[str] = None
    orientation: Optional[int] = None
    exif: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_exif(self) -> bool:
        return len(self.exif) > 0


class MetadataReader:
    """
    Reads image metadata with Pillow.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def read(self, image_data: bytes) -> ImageMetadata:
        """
        Decode metadata from image data.

        Raises:
            MetadataError: If the image cannot be decoded
        """
        try:
            with Image.open(io.BytesIO(image_data)) as img:
                tags = self._named_tags(img.getexif())
                orientation = tags.get('Orientation')
                return ImageMetadata(
                    width=img.width,
                    height=img.height,
                    format=img.format.lower() if img.format else None,
                    orientation=orientation if isinstance(orientation, int) else None,
                    exif=tags,
                )
        except Exception as e:
            self.logger.debug(f"Metadata decode failed: {e}")
            raise MetadataError(f"Could not decode metadata: {e}") from e

    @staticmethod
    def _named_tags(exif: Image.Exif) -> Dict[str, Any]:
        """Flatten IFD0, the Exif sub-IFD and the GPS IFD into one dict."""
        tags: Dict[str, Any] = {}
        for tag_id, value in exif.items():
            if tag_id in (EXIF_IFD_TAG, GPS_IFD_TAG):
                continue
            tags[TAGS.get(tag_id, str(tag_id))] = value

        for tag_id, value in exif.get_ifd(EXIF_IFD_TAG).items():
            tags[TAGS.get(tag_id, str(tag_id))] = value

        for tag_id, value in exif.get_ifd(GPS_IFD_TAG).items():
            tags[GPSTAGS.get(tag_id, f"GPS{tag_id}")] = value

        return tags
