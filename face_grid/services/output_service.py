"""Кодирование и атомарная запись итогового изображения.

Принципы:
- SRP: только кодирование и запись на диск.
- Файл появляется на месте назначения целиком или не появляется вовсе:
  запись идёт во временный файл рядом и завершается `os.replace`.
"""
from __future__ import annotations

import io
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Tuple

from PIL import Image

from face_grid.errors import OutputWriteError
from face_grid.models.grid_config import output_format
from face_grid.services.process_service import ProcessService

logger = logging.getLogger(__name__)

# форматы, в которых альфа-канал сохраняется как есть
ALPHA_FORMATS = frozenset({"PNG", "WEBP", "TIFF", "TGA"})


def _target_mode(path: Path) -> int:
    """Права файла результата: как у заменяемого файла, иначе 0666 с учётом umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except OSError:
        pass
    # umask читается только сменой; запись идёт из главного потока
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class OutputService:
    def __init__(self, process_service: ProcessService | None = None) -> None:
        self._process_service = process_service or ProcessService()

    def encode(self, image: Image.Image, fmt: str, background: Tuple[int, int, int, int]) -> bytes:
        """Кодирует изображение в байты формата `fmt` (например, "PNG" или "JPEG").

        Для форматов без альфа-канала изображение сводится на цвет фона.
        """
        if fmt not in ALPHA_FORMATS and image.mode == "RGBA":
            image = self._process_service.flatten(image, background)
        buffer = io.BytesIO()
        image.save(buffer, format=fmt)
        return buffer.getvalue()

    def save(
        self,
        image: Image.Image,
        path: str | Path,
        background: Tuple[int, int, int, int] = (0, 0, 0, 0),
    ) -> Path:
        """Записывает изображение в `path`; формат определяется расширением.

        Raises:
            OutputWriteError: формат не поддерживается, кодирование или запись не удались.
        """
        path = Path(path)
        fmt = output_format(path)
        if fmt is None:
            raise OutputWriteError(path, f"Неподдерживаемый формат вывода: {path}")

        try:
            data = self.encode(image, fmt, background)
        except (OSError, ValueError, KeyError) as exc:
            raise OutputWriteError(path, f"Не удалось закодировать {path} как {fmt}: {exc}") from exc

        directory = path.parent if str(path.parent) else Path(".")
        tmp_name = None
        replaced = False
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            # mkstemp создаёт файл с правами 0600
            os.chmod(tmp_name, _target_mode(path))
            os.replace(tmp_name, path)
            replaced = True
        except OSError as exc:
            raise OutputWriteError(path, f"Не удалось записать {path}: {exc}") from exc
        finally:
            if not replaced and tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.debug(f"Записано {len(data)} байт в {path} ({fmt})")
        return path
