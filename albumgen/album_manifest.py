"""
AlbumManifest - Per-album record of which originals have been sequenced.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator

from .exceptions import ManifestError
from .fsutil import write_json_atomic


MANIFEST_FILENAME = '_manifest.json'
SEQUENCE_WIDTH = 3


def format_sequence(number: int) -> str:
    """Zero-pad a sequence number, e.g. 7 -> '007'."""
    return str(number).zfill(SEQUENCE_WIDTH)


@dataclass
class AlbumManifest:
    """
    Mapping of original filename -> zero-padded sequence for one album.

    The manifest decides whether an original has been processed. Entries
    are only ever added; an assigned sequence never changes.

    Attributes:
        album: Album slug
        entries: Dict mapping original filename -> sequence string
        exists: True if the manifest was loaded from disk
        dirty: True if entries were added since load
    """
    album: str
    entries: Dict[str, str] = field(default_factory=dict)
    exists: bool = False
    dirty: bool = False

    @staticmethod
    def path_for(generated_dir: Path, album: str) -> Path:
        """Path of an album's manifest file."""
        return Path(generated_dir) / album / MANIFEST_FILENAME

    @classmethod
    def load(cls, generated_dir: Path, album: str) -> 'AlbumManifest':
        """
        Load an album's manifest, or start an empty one if none exists.

        Raises:
            ManifestError: If the file is not valid JSON or holds invalid entries
        """
        path = cls.path_for(generated_dir, album)
        if not path.exists():
            return cls(album=album)

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ManifestError(f"Invalid manifest {path}: {e}") from e

        return cls.from_dict(album, data, exists=True)

    @classmethod
    def from_dict(cls, album: str, data: dict, exists: bool = False) -> 'AlbumManifest':
        """Create from a filename -> sequence dictionary, validating entries."""
        if not isinstance(data, dict):
            raise ManifestError(f"Manifest for {album} is not a JSON object")

        seen = {}
        for filename, sequence in data.items():
            if not (isinstance(sequence, str) and sequence.isascii()
                    and sequence.isdigit() and int(sequence) > 0):
                raise ManifestError(
                    f"Manifest for {album} has invalid sequence {sequence!r} for {filename}"
                )
            # '2' and '002' name the same sequence
            number = int(sequence)
            if number in seen:
                raise ManifestError(
                    f"Manifest for {album} assigns sequence {sequence} to both "
                    f"{seen[number]} and {filename}"
                )
            seen[number] = filename

        return cls(album=album, entries=dict(data), exists=exists)

    def to_dict(self) -> Dict[str, str]:
        return dict(self.entries)

    def save(self, generated_dir: Path) -> Path:
        """Write the manifest, creating the album's output directory."""
        path = self.path_for(generated_dir, self.album)
        path.parent.mkdir(parents=True, exist_ok=True)
        write_json_atomic(path, self.to_dict())

        self.exists = True
        self.dirty = False
        return path

    @property
    def needs_save(self) -> bool:
        """True if the manifest changed or has never been written."""
        return self.dirty or not self.exists

    def next_sequence(self) -> int:
        """Highest assigned sequence + 1, or 1 for an empty manifest."""
        if not self.entries:
            return 1
        return max(int(seq) for seq in self.entries.values()) + 1

    def assign(self, filename: str) -> str:
        """
        Reserve the next sequence for filename and return it padded.

        Raises:
            ManifestError: If filename already has a sequence
        """
        if filename in self.entries:
            raise ManifestError(
                f"{self.album}/{filename} already has sequence {self.entries[filename]}"
            )
        sequence = format_sequence(self.next_sequence())
        self.entries[filename] = sequence
        self.dirty = True
        return sequence

    def sequence_for(self, filename: str) -> str:
        return self.entries[filename]

    def __contains__(self, filename: str) -> bool:
        return filename in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)
