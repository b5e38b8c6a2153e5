"""
VariantGenerator - Renders resized, recompressed variants of an original.
"""

import io
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image, ImageOps

from .exceptions import EncodeError


OUTPUT_EXTENSION = 'webp'


@dataclass(frozen=True)
class VariantSpec:
    """
    A named rendition of an original image.

    Attributes:
        name: Variant name, also the output file stem
        max_width: Maximum output width in pixels (never upscaled)
        quality: WebP quality (0-100)
    """
    name: str
    max_width: int
    quality: int

    @property
    def filename(self) -> str:
        return f"{self.name}.{OUTPUT_EXTENSION}"


VARIANTS: Tuple[VariantSpec, ...] = (
    VariantSpec('thumb', 320, 70),
    VariantSpec('medium', 1200, 80),
    VariantSpec('full', 2400, 85),
)


class VariantGenerator:
    """
    Generates WebP variants from original images using Pillow.
    """

    OUTPUT_FORMAT = 'WEBP'

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def render(self, image_data: bytes, spec: VariantSpec) -> bytes:
        """
        Render one variant from image data.

        The image is rotated upright according to its EXIF orientation,
        then scaled down to spec.max_width keeping the aspect ratio.

        Args:
            image_data: Original image as bytes
            spec: Variant to render

        Returns:
            Encoded WebP bytes

        Raises:
            EncodeError: If the image cannot be decoded or encoded
        """
        try:
            with Image.open(io.BytesIO(image_data)) as original:
                img = ImageOps.exif_transpose(original)
                img = self._convert_color_mode(img)
                img = self._resize_to_width(img, spec.max_width)

                output = io.BytesIO()
                img.save(output, format=self.OUTPUT_FORMAT, quality=spec.quality)
                return output.getvalue()

        except Exception as e:
            self.logger.error(f"Error rendering {spec.name} variant: {e}")
            raise EncodeError(f"Could not render {spec.name} variant: {e}") from e

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Convert image to a color mode WebP can encode, keeping alpha."""
        if img.mode in ('RGB', 'RGBA'):
            return img
        if img.mode == 'LA':
            return img.convert('RGBA')
        if img.mode == 'P':
            return img.convert('RGBA' if 'transparency' in img.info else 'RGB')
        return img.convert('RGB')

    def _resize_to_width(self, img: Image.Image, max_width: int) -> Image.Image:
        """Scale down to max_width; narrower images are left alone."""
        width, height = img.size
        if width <= max_width:
            return img
        new_height = max(1, round(height * max_width / width))
        return img.resize((max_width, new_height), Image.Resampling.LANCZOS)
