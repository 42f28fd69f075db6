"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
YELLOW = (255, 255, 0)


@pytest.fixture
def make_image(tmp_path):
    """Фабрика однотонных изображений на диске (формат по расширению)."""
    def _make(name, size=(100, 100), color=RED, mode="RGB"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new(mode, size, color=color).save(path)
        return path
    return _make


@pytest.fixture
def corrupt_image(tmp_path):
    """Файл с расширением .png, но без валидных данных."""
    path = tmp_path / "corrupt.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n" + b"not really a png" * 8)
    return path


@pytest.fixture
def split_image():
    """Широкое изображение 200x100: левая половина красная, правая синяя."""
    arr = np.zeros((100, 200, 3), dtype=np.uint8)
    arr[:, :100] = RED
    arr[:, 100:] = BLUE
    return Image.fromarray(arr)


@pytest.fixture
def quadrant_images(make_image):
    """Четыре квадратных изображения 100x100 разных цветов."""
    colors = [RED, GREEN, BLUE, YELLOW]
    return [make_image(f"face_{i}.png", color=c) for i, c in enumerate(colors)]
