"""
Pytest fixtures for albumgen tests.
"""

import io
import json

import pytest


EXIF_MAKE = 271
EXIF_MODEL = 272
EXIF_ORIENTATION = 274
EXIF_DATETIME = 306


@pytest.fixture
def make_image():
    """Fixture providing a factory for encoded test images."""
    from PIL import Image

    def _make_image(size=(640, 480), color='red', fmt='JPEG', mode='RGB', exif=None):
        img = Image.new(mode, size, color=color)
        buffer = io.BytesIO()
        save_kwargs = {}
        if exif:
            pil_exif = Image.Exif()
            for tag, value in exif.items():
                pil_exif[tag] = value
            save_kwargs['exif'] = pil_exif.tobytes()
        img.save(buffer, format=fmt, **save_kwargs)
        return buffer.getvalue()

    return _make_image


@pytest.fixture
def camera_exif():
    """Fixture providing IFD0 EXIF tags for a camera photo."""
    return {
        EXIF_MAKE: 'Canon',
        EXIF_MODEL: 'EOS R5',
        EXIF_ORIENTATION: 1,
        EXIF_DATETIME: '2024:05:01 10:30:00',
    }


@pytest.fixture
def sample_image_bytes(make_image, camera_exif):
    """Fixture providing sample JPEG bytes with EXIF."""
    return make_image(size=(800, 600), exif=camera_exif)


@pytest.fixture
def sample_png_bytes(make_image):
    """Fixture providing sample PNG bytes with transparency and no EXIF."""
    return make_image(size=(400, 300), fmt='PNG', mode='RGBA', color=(255, 0, 0, 128))


@pytest.fixture
def config(tmp_path):
    """Fixture providing a configuration rooted in a temporary directory."""
    from albumgen.config import PipelineConfig

    return PipelineConfig(root=str(tmp_path))


@pytest.fixture
def originals_tree(config, make_image, camera_exif):
    """
    Fixture providing an originals tree:

        doors/a.jpg   (EXIF)
        doors/b.jpg   (EXIF)
        doors/notes.txt
        nature/c.png  (no EXIF)
        README.md     (not an album)
    """
    root = config.originals_path
    doors = root / 'doors'
    nature = root / 'nature'
    doors.mkdir(parents=True)
    nature.mkdir(parents=True)

    (doors / 'a.jpg').write_bytes(make_image(size=(1600, 1200), color='blue', exif=camera_exif))
    (doors / 'b.jpg').write_bytes(make_image(size=(300, 200), color='green', exif=camera_exif))
    (doors / 'notes.txt').write_text('not an image')
    (nature / 'c.png').write_bytes(make_image(size=(500, 500), fmt='PNG'))
    (root / 'README.md').write_text('originals')

    return root


@pytest.fixture
def write_manifest(config):
    """Fixture providing a helper to pre-seed an album manifest."""

    def _write_manifest(album, entries):
        album_dir = config.generated_path / album
        album_dir.mkdir(parents=True, exist_ok=True)
        (album_dir / '_manifest.json').write_text(json.dumps(entries))
        return album_dir / '_manifest.json'

    return _write_manifest


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')
