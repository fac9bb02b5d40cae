import os

os.environ.setdefault("MPLBACKEND", "Agg")

import cv2
import numpy as np
import pytest


@pytest.fixture
def rng():
    return np.random.default_rng(1984)


@pytest.fixture
def noise_image(rng):
    return rng.integers(0, 256, size=(64, 48), dtype=np.uint8)


@pytest.fixture
def gradient_image():
    rows, cols = np.mgrid[0:40, 0:60]
    return ((rows * 3 + cols * 2) % 256).astype(np.uint8)


@pytest.fixture
def odd_image(rng):
    # 5 rows, 7 columns
    return rng.integers(0, 256, size=(5, 7), dtype=np.uint8)


@pytest.fixture
def write_png(tmp_path):
    """Writes a greyscale matrix as a PNG and returns its path"""

    def _write(image: np.ndarray, name: str = "source.png"):
        path = tmp_path / name
        assert cv2.imwrite(str(path), image)
        return path

    return _write
