"""Tests for the command-line front end."""

import pytest
from PIL import Image

from face_grid.cli import (
    EXIT_CONFIG_ERROR,
    EXIT_INTERRUPTED,
    EXIT_OK,
    EXIT_WRITE_ERROR,
    build_parser,
    main,
)
from face_grid.controllers.grid_controller import GridController


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.input == ["*.jpg"]
        assert args.cell_size == (100, 100)
        assert args.columns == 0
        assert args.max_images == 0
        assert args.output == "face-stack-output.jpg"
        assert args.background == (0, 0, 0, 0)
        assert args.compact is False

    def test_parses_values(self):
        args = build_parser().parse_args([
            "--input", "a/*.png", "b.jpg",
            "--cell-size", "1024x768",
            "--columns", "4",
            "--max-images", "12",
            "--background", "white",
        ])
        assert args.input == ["a/*.png", "b.jpg"]
        assert args.cell_size == (1024, 768)
        assert args.columns == 4
        assert args.max_images == 12
        assert args.background == (255, 255, 255, 255)

    @pytest.mark.parametrize("argv", [
        ["--cell-size", "100"],
        ["--cell-size", "0x100"],
        ["--columns", "-1"],
        ["--max-images", "many"],
        ["--background", "nope-colour"],
    ])
    def test_invalid_values_exit_with_usage_error(self, argv):
        with pytest.raises(SystemExit) as info:
            build_parser().parse_args(argv)
        assert info.value.code == 2

    def test_help_exits_zero(self, capsys):
        with pytest.raises(SystemExit) as info:
            main(["--help"])
        assert info.value.code == 0
        assert "--cell-size" in capsys.readouterr().out


class TestMain:
    """Сквозные запуски с кодами выхода."""

    def test_builds_grid(self, quadrant_images, tmp_path):
        output = tmp_path / "grid.png"
        code = main([
            "--input", str(tmp_path / "face_*.png"),
            "--cell-size", "100x100",
            "--columns", "2",
            "--output", str(output),
        ])
        assert code == EXIT_OK
        with Image.open(output) as saved:
            assert saved.size == (200, 200)

    def test_jpeg_output(self, quadrant_images, tmp_path):
        output = tmp_path / "grid.jpg"
        code = main([
            "--input", *map(str, quadrant_images),
            "--cell-size", "50x40",
            "--columns", "3",
            "--output", str(output),
        ])
        assert code == EXIT_OK
        with Image.open(output) as saved:
            assert saved.format == "JPEG"
            assert saved.size == (150, 80)

    def test_max_images(self, make_image, tmp_path):
        for i in range(20):
            make_image(f"img_{i:02d}.png")
        output = tmp_path / "grid.png"
        code = main([
            "--input", str(tmp_path / "img_*.png"),
            "--max-images", "5",
            "--columns", "5",
            "--output", str(output),
        ])
        assert code == EXIT_OK
        with Image.open(output) as saved:
            assert saved.size == (500, 100)

    def test_previous_output_is_not_an_input(self, make_image, tmp_path):
        make_image("a.png")
        output = make_image("grid.png", size=(7, 7))
        code = main([
            "--input", str(tmp_path / "*.png"),
            "--columns", "2",
            "--output", str(output),
        ])
        assert code == EXIT_OK
        with Image.open(output) as saved:
            # только a.png: одна ячейка и одна пустая
            assert saved.size == (200, 100)

    def test_zero_valid_images(self, tmp_path):
        output = tmp_path / "grid.png"
        code = main(["--input", str(tmp_path / "*.jpg"), "--output", str(output)])
        assert code == EXIT_CONFIG_ERROR
        assert not output.exists()

    def test_only_corrupt_images(self, corrupt_image, tmp_path):
        output = tmp_path / "grid.png"
        code = main(["--input", str(corrupt_image), "--output", str(output)])
        assert code == EXIT_CONFIG_ERROR
        assert not output.exists()

    def test_unsupported_output_format(self, quadrant_images, tmp_path):
        output = tmp_path / "grid.unknown"
        code = main(["--input", str(quadrant_images[0]), "--output", str(output)])
        assert code == EXIT_CONFIG_ERROR
        assert not output.exists()

    def test_unwritable_output(self, quadrant_images, tmp_path):
        output = tmp_path / "missing_dir" / "grid.png"
        code = main(["--input", str(quadrant_images[0]), "--output", str(output)])
        assert code == EXIT_WRITE_ERROR
        assert not output.exists()

    def test_interrupted(self, quadrant_images, tmp_path):
        class InterruptedController(GridController):
            def run(self, config):
                raise KeyboardInterrupt

        output = tmp_path / "grid.png"
        code = main(
            ["--input", str(quadrant_images[0]), "--output", str(output)],
            controller=InterruptedController(),
        )
        assert code == EXIT_INTERRUPTED
        assert not output.exists()
