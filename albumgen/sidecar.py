"""
Sidecar - Per-image metadata record written next to its variants.
"""

import math
import numbers
import re
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from .exceptions import MetadataError
from .fsutil import write_json_atomic
from .metadata_reader import ImageMetadata


SIDECAR_FILENAME = 'meta.json'
EXIF_DATETIME_FORMAT = '%Y:%m:%d %H:%M:%S'
UTC_OFFSET = re.compile(r'^[+-]\d{2}:\d{2}$')


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode('utf-8', errors='replace')
    text = str(value).replace('\x00', '').strip()
    return text or None


def _to_float(value: Any) -> Optional[float]:
    if isinstance(value, tuple) and len(value) == 2:
        if not value[1]:
            return None
        return float(value[0]) / float(value[1])
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        result = float(value)
        return None if math.isnan(result) or math.isinf(result) else result
    return None


def _to_int(value: Any) -> Optional[int]:
    # ISOSpeedRatings is sometimes stored as a sequence
    if isinstance(value, (tuple, list)):
        return _to_int(value[0]) if value else None
    number = _to_float(value)
    return int(number) if number is not None else None


def _parse_exif_datetime(value: Any, offset: Any = None) -> Optional[str]:
    """Convert 'YYYY:MM:DD HH:MM:SS' (+ optional '+HH:MM' offset) to ISO-8601."""
    text = _to_text(value)
    if not text:
        return None
    try:
        moment = datetime.strptime(text, EXIF_DATETIME_FORMAT)
    except ValueError:
        return None

    iso = moment.isoformat()
    offset_text = _to_text(offset)
    if offset_text and UTC_OFFSET.match(offset_text):
        iso += offset_text
    return iso


def _gps_coordinate(values: Any, ref: Any) -> Optional[float]:
    """Degrees/minutes/seconds + hemisphere ref -> signed decimal degrees."""
    if not isinstance(values, tuple) or len(values) != 3:
        return None
    parts = [_to_float(v) for v in values]
    if any(p is None for p in parts):
        return None
    degrees, minutes, seconds = parts
    coordinate = degrees + minutes / 60.0 + seconds / 3600.0
    if (_to_text(ref) or '').upper() in ('S', 'W'):
        coordinate = -coordinate
    return round(coordinate, 6)


@dataclass
class CameraInfo:
    make: Optional[str] = None
    model: Optional[str] = None


@dataclass
class GpsPosition:
    lat: float
    lon: float


@dataclass
class Sidecar:
    """
    Metadata sidecar for one processed image.

    Attributes:
        original_file: Original filename within the album
        album: Album slug
        sequence: Zero-padded sequence
        width, height, format, orientation: Decoded image properties
        taken_at: Capture time as ISO-8601, if recorded
        camera: Camera make and model
        lens: Lens model
        iso: ISO speed
        aperture: F-number
        focal_length: Focal length in mm
        exposure_time: Exposure time in seconds
        gps: Capture position, if recorded
    """
    original_file: str
    album: str
    sequence: str
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
    orientation: Optional[int] = None
    taken_at: Optional[str] = None
    camera: CameraInfo = field(default_factory=CameraInfo)
    lens: Optional[str] = None
    iso: Optional[int] = None
    aperture: Optional[float] = None
    focal_length: Optional[float] = None
    exposure_time: Optional[float] = None
    gps: Optional[GpsPosition] = None

    @classmethod
    def from_metadata(
        cls,
        metadata: ImageMetadata,
        album: str,
        sequence: str,
        original_file: str
    ) -> 'Sidecar':
        """
        Map decoded metadata onto a sidecar.

        Raises:
            MetadataError: If the image carries no EXIF data at all
        """
        if not metadata.has_exif:
            raise MetadataError("no EXIF data")

        exif = metadata.exif
        taken_at = (
            _parse_exif_datetime(exif.get('DateTimeOriginal'), exif.get('OffsetTimeOriginal'))
            or _parse_exif_datetime(exif.get('DateTime'), exif.get('OffsetTime'))
        )

        gps = None
        lat = _gps_coordinate(exif.get('GPSLatitude'), exif.get('GPSLatitudeRef'))
        lon = _gps_coordinate(exif.get('GPSLongitude'), exif.get('GPSLongitudeRef'))
        if lat is not None and lon is not None:
            gps = GpsPosition(lat=lat, lon=lon)

        return cls(
            original_file=original_file,
            album=album,
            sequence=sequence,
            width=metadata.width or None,
            height=metadata.height or None,
            format=metadata.format,
            orientation=metadata.orientation,
            taken_at=taken_at,
            camera=CameraInfo(
                make=_to_text(exif.get('Make')),
                model=_to_text(exif.get('Model')),
            ),
            lens=_to_text(exif.get('LensModel')),
            iso=_to_int(exif.get('ISOSpeedRatings')),
            aperture=_to_float(exif.get('FNumber')),
            focal_length=_to_float(exif.get('FocalLength')),
            exposure_time=_to_float(exif.get('ExposureTime')),
            gps=gps,
        )

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: Path) -> None:
        """Write the sidecar as JSON."""
        write_json_atomic(path, self.to_dict())
