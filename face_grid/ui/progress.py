"""Отчёт о ходе сборки в терминал.

Принципы:
- SRP: только форматирование сообщений о прогрессе; вывод идёт через `logging`.
- Контроллер ничего не знает о формате строк, только вызывает `on_*`-методы.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from face_grid.models.grid_canvas import GridLayout
from face_grid.models.image_model import SourceImage

logger = logging.getLogger(__name__)


_SIZE_UNITS = ("КБ", "МБ", "ГБ")


def format_size(size_bytes: Optional[int]) -> str:
    """Размер файла для отчёта: байты целым числом, дальше с одним знаком."""
    if size_bytes is None:
        return "?"
    if size_bytes < 1024:
        return f"{size_bytes} Б"
    value = size_bytes / 1024
    for unit in _SIZE_UNITS[:-1]:
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} {_SIZE_UNITS[-1]}"


class ProgressReporter:
    """Строки вида «(Шаг 1/2) (3/10) Чтение face.jpg, 640 × 480 px»."""

    def on_read(self, index: int, total: int, source: SourceImage) -> None:
        logger.info(
            f"(Шаг 1/2) ({index + 1}/{total}) Чтение {source.path.name}, "
            f"{source.width} × {source.height} px"
        )
        logger.debug(f"  {source.path}: режим файла {source.file_mode}, {format_size(source.size_bytes)}")

    def on_skip(self, index: int, total: int, path: Path, reason: str) -> None:
        logger.warning(f"(Шаг 1/2) ({index + 1}/{total}) Пропуск {path.name}: {reason}")

    def on_limit_reached(self, max_images: int) -> None:
        logger.info(f"Достигнут максимум в {max_images} изображений; остальные файлы пропущены.")

    def on_read_done(self, scanned: int, valid: int) -> None:
        logger.info(f"(Шаг 1/2) Готово. Обработано файлов: {scanned}, пригодных: {valid}.")

    def on_layout(self, layout: GridLayout) -> None:
        width, height = layout.size
        logger.info(
            f"Размер результата {width}x{height}: "
            f"{layout.rows} строк(и) и {layout.columns} колонок(ки) изображений."
        )

    def on_place(self, index: int, total: int) -> None:
        logger.debug(f"(Шаг 2/2) ({index + 1}/{total}) Вставка ячейки")

    def on_place_done(self, placed: int) -> None:
        logger.info(f"(Шаг 2/2) Готово. Вставлено изображений: {placed}.")

    def on_saved(self, path: Path) -> None:
        logger.info(f"Сохранено: {path}")
