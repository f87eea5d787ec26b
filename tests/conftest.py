import numpy as np
import pytest
from PIL import Image


def gradient_rgb(height: int = 4) -> np.ndarray:
    """Greyscale ramp covering every luma 0..255 once per row."""
    ramp = np.arange(256, dtype=np.uint8)
    row = np.repeat(ramp[:, None], 3, axis=1)
    return np.repeat(row[None, :, :], height, axis=0)


def random_rgb(h: int = 64, w: int = 48, seed: int = 42) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, (h, w, 3), dtype=np.uint8)


@pytest.fixture
def ramp_png(tmp_path):
    path = tmp_path / "ramp.png"
    Image.fromarray(gradient_rgb(8)).save(path)
    return path


@pytest.fixture
def photo_jpg(tmp_path):
    path = tmp_path / "photo.jpg"
    Image.fromarray(random_rgb()).save(path, quality=90)
    return path


@pytest.fixture
def rgba_png(tmp_path):
    path = tmp_path / "sprite.png"
    rgba = np.zeros((10, 12, 4), dtype=np.uint8)
    rgba[..., :3] = 200
    rgba[..., 3] = 255
    rgba[:5, :, 3] = 0
    Image.fromarray(rgba).save(path)
    return path


@pytest.fixture
def broken_png(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"this is not an image")
    return path
