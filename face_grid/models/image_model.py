"""Модели данных для изображений.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image


@dataclass(frozen=True)
class SourceImage:
    """Декодированное входное изображение и его метаданные.

    Живёт только до того, как вписано в свою ячейку сетки. Пиксели всегда
    RGBA (`pil_image.mode`), а `file_mode` хранит режим, в котором файл был
    записан на диск: по нему в отчёте видно, что была конвертация.

    Fields:
        path: Путь к исходному файлу.
        pil_image: Загруженное изображение PIL (в режиме RGBA).
        width: Ширина, px.
        height: Высота, px.
        file_mode: Режим PIL файла до конвертации в RGBA, например "RGB" или "P".
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    pil_image: Image.Image
    width: int
    height: int
    file_mode: str
    size_bytes: Optional[int]
