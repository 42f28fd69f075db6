"""Конфигурация одного запуска сборки сетки.

Принципы:
- SRP: только параметры запуска и их валидация, без ввода-вывода.
- Чистый код: неизменяемость (`frozen=True`); конфигурация создаётся один раз
  и явно передаётся в контроллер.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageColor

from face_grid.errors import ConfigError

RGBA = Tuple[int, int, int, int]

TRANSPARENT: RGBA = (0, 0, 0, 0)


def parse_cell_size(value: str) -> Tuple[int, int]:
    """Разбирает строку размеров вида `WIDTHxHEIGHT` (например, `1024x1024`).

    Raises:
        ConfigError: если строка не состоит ровно из двух положительных целых.
    """
    parts = value.strip().lower().split("x")
    if len(parts) != 2:
        raise ConfigError(f"Размер ячейки должен быть в формате WIDTHxHEIGHT: {value!r}")
    try:
        width, height = (int(p) for p in parts)
    except ValueError as exc:
        raise ConfigError(f"Не удалось разобрать целое значение в {value!r}") from exc
    if width <= 0 or height <= 0:
        raise ConfigError(f"Размер ячейки должен быть положительным: {value!r}")
    return width, height


def parse_background(value: str) -> RGBA:
    """Цвет фона пустых ячеек: `transparent` или любой цвет `PIL.ImageColor`."""
    if value.strip().lower() in ("transparent", "none"):
        return TRANSPARENT
    try:
        return ImageColor.getcolor(value, "RGBA")
    except ValueError as exc:
        raise ConfigError(f"Неизвестный цвет фона: {value!r}") from exc


def resolve_columns(columns: int, count: int) -> int:
    """Число колонок сетки; при `columns == 0` сетка максимально близка к квадрату."""
    if columns > 0:
        return columns
    return max(1, math.ceil(math.sqrt(count)))


def output_format(path: Path) -> Optional[str]:
    """Формат Pillow для записи по расширению файла (`None`, если записать нельзя)."""
    fmt = Image.registered_extensions().get(path.suffix.lower())
    if fmt is None or fmt not in Image.SAVE:
        return None
    return fmt


@dataclass(frozen=True)
class GridConfig:
    """Неизменяемые параметры сборки сетки.

    Fields:
        inputs: Упорядоченные пути к входным файлам (маски уже раскрыты).
        output: Путь итогового изображения; формат определяется расширением.
        cell_width: Ширина ячейки, px.
        cell_height: Высота ячейки, px.
        columns: Число колонок; 0 — подобрать автоматически.
        max_images: Максимум используемых изображений; 0 — без ограничения.
        background: Цвет пустых ячеек (RGBA).
        compact: Отбрасывать нечитаемые файлы вместо пустых ячеек.
        workers: Потоков декодирования; 0 — по числу CPU.
    """
    inputs: Tuple[Path, ...]
    output: Path
    cell_width: int = 100
    cell_height: int = 100
    columns: int = 0
    max_images: int = 0
    background: RGBA = TRANSPARENT
    compact: bool = False
    workers: int = 0

    def __post_init__(self) -> None:
        # frozen: нормализуем через object.__setattr__
        object.__setattr__(self, "inputs", tuple(Path(p) for p in self.inputs))
        object.__setattr__(self, "output", Path(self.output))
        object.__setattr__(self, "background", tuple(self.background))

        if self.cell_width <= 0 or self.cell_height <= 0:
            raise ConfigError(
                f"Размер ячейки должен быть положительным: {self.cell_width}x{self.cell_height}"
            )
        if self.columns < 0:
            raise ConfigError(f"Число колонок не может быть отрицательным: {self.columns}")
        if self.max_images < 0:
            raise ConfigError(f"Максимум изображений не может быть отрицательным: {self.max_images}")
        if self.workers < 0:
            raise ConfigError(f"Число потоков не может быть отрицательным: {self.workers}")
        if len(self.background) != 4 or any(not 0 <= c <= 255 for c in self.background):
            raise ConfigError(f"Цвет фона должен быть RGBA 0..255: {self.background}")
        if output_format(self.output) is None:
            raise ConfigError(f"Неподдерживаемый формат вывода: {self.output}")

    @property
    def cell_size(self) -> Tuple[int, int]:
        return self.cell_width, self.cell_height

    def selected_inputs(self) -> Tuple[Path, ...]:
        """Первые `max_images` входов в исходном порядке (все, если ограничения нет)."""
        if self.max_images == 0:
            return self.inputs
        return self.inputs[: self.max_images]
