"""Контроллер сборки сетки: оркестрация сервисов в один линейный конвейер.

SOLID:
- SRP: класс управляет порядком шагов (чтение → вписывание → раскладка → запись),
  без логики обработки изображений.
- DIP: зависит от сервисов как от ролей; их можно подменить в тестах.
Clean Code:
- Конфигурация передаётся явно, глобального состояния нет.
"""
from __future__ import annotations

import os
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import closing
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from PIL import Image

from face_grid.errors import ImageDecodeError, NoValidImagesError
from face_grid.models.grid_canvas import GridCanvas, GridLayout
from face_grid.models.grid_config import GridConfig, resolve_columns
from face_grid.models.image_model import SourceImage
from face_grid.services.image_service import ImageService
from face_grid.services.output_service import OutputService
from face_grid.services.process_service import ProcessService
from face_grid.ui.progress import ProgressReporter

Prepared = Tuple[SourceImage, Image.Image]


@dataclass
class ComposeReport:
    """Итог одного запуска.

    Fields:
        image: Собранный холст (RGBA).
        layout: Геометрия сетки.
        placed: Пути изображений, попавших в сетку, в порядке ячеек.
        skipped: Пары (путь, причина) для нечитаемых файлов.
        scanned: Сколько входных файлов было просмотрено.
        output: Путь записанного файла (после `run`).
    """
    image: Image.Image
    layout: GridLayout
    placed: List[Path]
    skipped: List[Tuple[Path, str]]
    scanned: int
    output: Optional[Path] = None


@dataclass
class GridController:
    """Связывает сервисы загрузки, обработки и записи.

    Ответственности:
    - Параллельное чтение и вписывание входных изображений в ячейки.
    - Применение политики для нечитаемых файлов (пустая ячейка или `compact`).
    - Раскладка ячеек построчно и однократная запись результата.
    """
    image_service: ImageService = field(default_factory=ImageService)
    process_service: ProcessService = field(default_factory=ProcessService)
    output_service: OutputService = field(default_factory=OutputService)
    reporter: ProgressReporter = field(default_factory=ProgressReporter)

    def run(self, config: GridConfig) -> ComposeReport:
        """Собирает сетку и записывает её в `config.output`.

        Raises:
            NoValidImagesError: нет ни одного пригодного изображения; файл не пишется.
            OutputWriteError: запись результата не удалась.
        """
        report = self.compose(config)
        report.output = self.output_service.save(report.image, config.output, config.background)
        self.reporter.on_saved(report.output)
        return report

    def compose(self, config: GridConfig) -> ComposeReport:
        """Собирает сетку в памяти, ничего не записывая на диск."""
        if config.compact:
            candidates: Sequence[Path] = config.inputs
        else:
            candidates = config.selected_inputs()
            if len(candidates) < len(config.inputs):
                self.reporter.on_limit_reached(config.max_images)
        if not candidates:
            raise NoValidImagesError("Не найдено ни одного входного файла")

        cells: List[Optional[Image.Image]] = []
        placed: List[Path] = []
        skipped: List[Tuple[Path, str]] = []
        scanned = 0
        total = len(candidates)

        prepared = self._iter_prepared(candidates, config.cell_size, self._worker_count(config))
        with closing(prepared):
            for index, (path, result, error) in enumerate(prepared):
                scanned += 1
                if error is not None:
                    self.reporter.on_skip(index, total, path, str(error))
                    skipped.append((path, str(error)))
                    if not config.compact:
                        # ячейка остаётся пустой
                        cells.append(None)
                    continue

                source, cell = result
                self.reporter.on_read(index, total, source)
                cells.append(cell)
                placed.append(path)

                if config.compact and config.max_images and len(placed) >= config.max_images:
                    if scanned < total:
                        self.reporter.on_limit_reached(config.max_images)
                    break

        self.reporter.on_read_done(scanned, len(placed))
        if not placed:
            raise NoValidImagesError(f"Ни одно из {scanned} входных изображений не удалось прочитать")

        columns = resolve_columns(config.columns, len(cells))
        layout = GridLayout(len(cells), columns, config.cell_width, config.cell_height)
        self.reporter.on_layout(layout)

        canvas = GridCanvas(layout, config.background)
        for index, cell in enumerate(cells):
            if cell is None:
                continue
            canvas.paste(index, cell)
            self.reporter.on_place(index, len(cells))
        self.reporter.on_place_done(len(placed))

        return ComposeReport(
            image=canvas.to_image(),
            layout=layout,
            placed=placed,
            skipped=skipped,
            scanned=scanned,
        )

    # ---- Helpers ----
    def _prepare(self, path: Path, cell_size: Tuple[int, int]) -> Prepared:
        source = self.image_service.load_image(path)
        return source, self.process_service.make_cell(source, cell_size)

    def _iter_prepared(
        self,
        paths: Sequence[Path],
        cell_size: Tuple[int, int],
        workers: int,
    ) -> Iterator[Tuple[Path, Optional[Prepared], Optional[ImageDecodeError]]]:
        """Читает и вписывает изображения в пуле потоков, выдавая результаты по порядку.

        В работе одновременно не больше `2 * workers` файлов, так что полные
        исходные изображения не накапливаются в памяти.
        """
        remaining = iter(paths)
        pending: deque[Tuple[Path, Future]] = deque()
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="face-grid") as pool:
            try:
                for path in remaining:
                    pending.append((path, pool.submit(self._prepare, path, cell_size)))
                    if len(pending) >= 2 * workers:
                        break

                while pending:
                    path, future = pending.popleft()
                    upcoming = next(remaining, None)
                    if upcoming is not None:
                        pending.append((upcoming, pool.submit(self._prepare, upcoming, cell_size)))
                    try:
                        yield path, future.result(), None
                    except ImageDecodeError as exc:
                        yield path, None, exc
            finally:
                for _path, future in pending:
                    future.cancel()

    @staticmethod
    def _worker_count(config: GridConfig) -> int:
        if config.workers > 0:
            return config.workers
        return os.cpu_count() or 1
