"""Иерархия исключений приложения.

Принципы:
- Сервисы и контроллер только выбрасывают исключения; в сообщения и коды выхода
  их превращает CLI.
"""
from __future__ import annotations

from pathlib import Path


class FaceGridError(Exception):
    """Базовая ошибка приложения."""


class ConfigError(FaceGridError, ValueError):
    """Некорректная конфигурация запуска (флаги, размеры, расширение вывода)."""


class NoValidImagesError(ConfigError):
    """Не найдено ни одного входного файла или ни один не удалось декодировать."""


class ImageDecodeError(FaceGridError, ValueError):
    """Конкретный входной файл не удалось прочитать или декодировать."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path


class OutputWriteError(FaceGridError, OSError):
    """Не удалось закодировать или записать итоговое изображение."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path
