from __future__ import annotations

from typing import Tuple

from PIL import Image, ImageOps

from face_grid.models.image_model import SourceImage


class ProcessService:
    def fit_to_cell(self, image: Image.Image, cell_size: Tuple[int, int]) -> Image.Image:
        """
        Вписывание изображения в ячейку «с покрытием» (cover-crop):
        - масштаб так, чтобы изображение целиком накрыло ячейку (пропорции сохраняются)
        - лишнее обрезается поровну с обеих сторон
        Маленькие изображения увеличиваются. Результат ровно `cell_size`, RGBA.
        """
        width, height = cell_size
        if width <= 0 or height <= 0:
            raise ValueError(f"cell size must be positive, got {width}x{height}")
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        if image.size == (width, height):
            return image.copy()
        return ImageOps.fit(image, (width, height), method=Image.LANCZOS, centering=(0.5, 0.5))

    def make_cell(self, source: SourceImage, cell_size: Tuple[int, int]) -> Image.Image:
        """Готовая ячейка из загруженного изображения."""
        return self.fit_to_cell(source.pil_image, cell_size)

    def flatten(self, image: Image.Image, background: Tuple[int, int, int, int]) -> Image.Image:
        """
        Сведение RGBA на непрозрачный фон (8-бит, RGB) для форматов без альфа-канала.
        Прозрачный фон сводится на чёрный.
        """
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        r, g, b, _a = background
        base = Image.new("RGB", image.size, color=(r, g, b))
        base.paste(image, (0, 0), mask=image.getchannel("A"))
        return base
