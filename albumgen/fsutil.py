"""
Filesystem helpers.
"""

import json
import os
from pathlib import Path
from typing import Any


PART_SUFFIX = '.part'


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """
    Write data to path via a temporary sibling file and a rename.

    Readers see either the old file (or none) or the complete new one,
    never a truncated write.
    """
    path = Path(path)
    tmp_path = path.with_name(path.name + PART_SUFFIX)
    try:
        tmp_path.write_bytes(data)
        os.replace(tmp_path, path)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise


def write_json_atomic(path: Path, data: Any) -> None:
    """Serialize data as indented JSON and write it atomically."""
    write_bytes_atomic(path, json.dumps(data, indent=2).encode('utf-8'))
