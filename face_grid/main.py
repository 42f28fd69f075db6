"""Точка входа в приложение."""
from face_grid.cli import main as cli_main


def main() -> int:
    """Запускает сборку сетки с аргументами командной строки."""
    return cli_main()


if __name__ == "__main__":
    raise SystemExit(main())
