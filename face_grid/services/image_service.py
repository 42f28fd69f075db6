"""Загрузка изображений с диска и упаковка метаданных.

Принципы:
- SRP: класс отвечает только за загрузку и базовое извлечение свойств.
- OCP: новые источники (стрим, URL) можно добавить отдельными методами.
- LSP/ISP: возвращает `SourceImage` с предсказуемыми полями; интерфейс узкий и конкретный.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from face_grid.errors import ImageDecodeError
from face_grid.models.image_model import SourceImage

logger = logging.getLogger(__name__)


class ImageService:
    def load_image(self, file_path: str | Path) -> SourceImage:
        """Загружает изображение с диска и возвращает его вместе с метаданными.

        Поворот по EXIF применяется сразу, чтобы снимки с камеры телефона
        не оказались в сетке боком.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `SourceImage` c `PIL.Image.Image` (в режиме RGBA), размерами, режимом и размером файла.

        Raises:
            ImageDecodeError: если файл не существует, не распознан как изображение
                или повреждён.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise ImageDecodeError(path, f"Файл не найден: {path}")

        try:
            with Image.open(path) as opened:
                source_mode = opened.mode
                # повреждённые данные всплывут здесь, а не при вставке
                opened.load()
                try:
                    oriented = ImageOps.exif_transpose(opened)
                except Exception as exc:
                    # битый EXIF не делает пиксели нечитаемыми
                    logger.warning(f"Не удалось применить поворот из EXIF для {path}: {exc!r}")
                    oriented = opened
                pil_image = oriented.convert("RGBA")
        except UnidentifiedImageError as exc:
            raise ImageDecodeError(path, f"Файл не является изображением: {path}") from exc
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
            # усечённые и битые файлы Pillow сообщает через OSError/SyntaxError
            raise ImageDecodeError(path, f"Не удалось декодировать {path}: {exc}") from exc

        width, height = pil_image.size
        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        return SourceImage(
            path=path,
            pil_image=pil_image,
            width=width,
            height=height,
            file_mode=source_mode,
            size_bytes=size_bytes,
        )
