"""Геометрия сетки и буфер итогового изображения.

Принципы:
- SRP: `GridLayout` только считает размеры и координаты ячеек,
  `GridCanvas` только хранит пиксели.
- Каждая ячейка — отдельный непересекающийся срез numpy-буфера, поэтому
  запись из разных потоков не требует блокировок.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from PIL import Image

Box = Tuple[int, int, int, int]


@dataclass(frozen=True)
class GridLayout:
    """Раскладка `count` ячеек по `columns` колонкам построчно (row-major)."""
    count: int
    columns: int
    cell_width: int
    cell_height: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"count must be >= 0, got {self.count}")
        if self.columns <= 0:
            raise ValueError(f"columns must be > 0, got {self.columns}")
        if self.cell_width <= 0 or self.cell_height <= 0:
            raise ValueError(f"cell size must be positive, got {self.cell_width}x{self.cell_height}")

    @property
    def rows(self) -> int:
        return math.ceil(self.count / self.columns)

    @property
    def size(self) -> Tuple[int, int]:
        """Размер холста (ширина, высота), px."""
        return self.columns * self.cell_width, self.rows * self.cell_height

    def position(self, index: int) -> Tuple[int, int]:
        """(строка, колонка) ячейки с индексом `index`."""
        self._check_index(index)
        return index // self.columns, index % self.columns

    def cell_box(self, index: int) -> Box:
        """Прямоугольник ячейки `(left, top, right, bottom)` на холсте."""
        row, col = self.position(index)
        left = col * self.cell_width
        top = row * self.cell_height
        return left, top, left + self.cell_width, top + self.cell_height

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.count:
            raise IndexError(f"cell index {index} out of range [0, {self.count})")


class GridCanvas:
    """RGBA-холст сетки, заполненный цветом фона.

    Создаётся один раз на запуск, наполняется по одной ячейке и один раз
    отдаётся на запись через `to_image()`.
    """

    def __init__(self, layout: GridLayout, background: Tuple[int, int, int, int] = (0, 0, 0, 0)) -> None:
        self.layout = layout
        self.background = background
        width, height = layout.size
        self._pixels = np.empty((height, width, 4), dtype=np.uint8)
        self._pixels[:] = np.asarray(background, dtype=np.uint8)

    @property
    def size(self) -> Tuple[int, int]:
        return self.layout.size

    def paste(self, index: int, cell_image: Image.Image) -> None:
        """Записывает изображение размера ячейки в ячейку `index`.

        Raises:
            IndexError: индекс вне сетки.
            ValueError: размер изображения не совпадает с размером ячейки.
        """
        left, top, right, bottom = self.layout.cell_box(index)
        expected = (right - left, bottom - top)
        if cell_image.size != expected:
            raise ValueError(f"cell image is {cell_image.size}, expected {expected}")
        if cell_image.mode != "RGBA":
            cell_image = cell_image.convert("RGBA")
        self._pixels[top:bottom, left:right] = np.asarray(cell_image, dtype=np.uint8)

    def cell_pixels(self, index: int) -> np.ndarray:
        """Копия пикселей ячейки `index` (H, W, 4)."""
        left, top, right, bottom = self.layout.cell_box(index)
        return self._pixels[top:bottom, left:right].copy()

    def to_image(self) -> Image.Image:
        return Image.fromarray(self._pixels)
