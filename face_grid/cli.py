"""Командная строка face-grid: сборка сетки из готовых снимков лиц.

Usage:
    face-grid --input "faces/*.jpg" --cell-size 256x256 --columns 8 --output grid.png
    face-grid --input a.png b.png "more/**/*.png" --max-images 20 --output grid.jpg

Examples:
    # Квадратная сетка из всех jpg в текущей папке (по умолчанию)
    face-grid

    # Нечитаемые файлы не оставляют пустых ячеек
    face-grid --input "faces/*" --compact --background white --output grid.jpg
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from face_grid.controllers.grid_controller import GridController
from face_grid.errors import ConfigError, OutputWriteError
from face_grid.models.grid_config import GridConfig, parse_background, parse_cell_size
from face_grid.services.input_service import InputService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_WRITE_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def _cell_size_arg(value: str):
    try:
        return parse_cell_size(value)
    except ConfigError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _background_arg(value: str):
    try:
        return parse_background(value)
    except ConfigError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"ожидалось целое число: {value!r}") from exc
    if number < 0:
        raise argparse.ArgumentTypeError(f"значение не может быть отрицательным: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="face-grid",
        description="Собирает сетку из готовых (уже обрезанных) изображений лиц.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
    0    - Успех
    1    - Не удалось записать результат
    2    - Неверные параметры или нет ни одного пригодного изображения
    130  - Прервано (Ctrl-C), результат не записан
""",
    )
    parser.add_argument("--input", "-i", nargs="+", default=["*.jpg"], metavar="PATTERN",
                        help='Пути или glob-маски входных файлов (default: "*.jpg")')
    parser.add_argument("--cell-size", type=_cell_size_arg, default=(100, 100), metavar="WxH",
                        help="Размер ячейки в пикселях, например 1024x1024 (default: 100x100)")
    parser.add_argument("--columns", type=_non_negative_int, default=0, metavar="N",
                        help="Число колонок; 0 — подобрать сетку, близкую к квадрату (default: 0)")
    parser.add_argument("--max-images", type=_non_negative_int, default=0, metavar="N",
                        help="Максимум используемых изображений; 0 — без ограничения (default: 0)")
    parser.add_argument("--output", "-o", default="face-stack-output.jpg", metavar="PATH",
                        help="Файл результата; формат по расширению (default: face-stack-output.jpg)")
    parser.add_argument("--background", type=_background_arg, default=(0, 0, 0, 0), metavar="COLOR",
                        help="Цвет пустых ячеек: имя, #RRGGBB[AA] или transparent (default: transparent)")
    parser.add_argument("--compact", action="store_true",
                        help="Отбрасывать нечитаемые файлы вместо пустых ячеек")
    parser.add_argument("--workers", type=_non_negative_int, default=0, metavar="N",
                        help="Потоков декодирования; 0 — по числу CPU (default: 0)")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Подробный вывод (DEBUG)")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Только предупреждения и ошибки")
    return parser


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )


def build_config(args: argparse.Namespace, input_service: Optional[InputService] = None) -> GridConfig:
    """Создаёт неизменяемую конфигурацию из разобранных аргументов."""
    input_service = input_service or InputService()
    inputs = input_service.expand(args.input)
    # результат прошлого запуска часто совпадает с маской входа (*.jpg)
    output = Path(args.output).resolve()
    inputs = [p for p in inputs if p.resolve() != output]
    cell_width, cell_height = args.cell_size
    return GridConfig(
        inputs=tuple(inputs),
        output=args.output,
        cell_width=cell_width,
        cell_height=cell_height,
        columns=args.columns,
        max_images=args.max_images,
        background=args.background,
        compact=args.compact,
        workers=args.workers,
    )


def main(argv: Optional[Sequence[str]] = None, controller: Optional[GridController] = None) -> int:
    """Разбирает аргументы, собирает сетку и возвращает код выхода."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    patterns: List[str] = args.input
    logger.info(f"Входные файлы: {' '.join(patterns)}; результат: {args.output}")

    try:
        config = build_config(args)
        (controller or GridController()).run(config)
    except ConfigError as exc:
        logger.error(str(exc))
        return EXIT_CONFIG_ERROR
    except OutputWriteError as exc:
        logger.error(str(exc))
        return EXIT_WRITE_ERROR
    except KeyboardInterrupt:
        logger.error("Прервано; результат не записан.")
        return EXIT_INTERRUPTED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
