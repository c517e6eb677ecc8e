"""Tests for the command-line interface.

main() calls ti.init(), which would invalidate the fields of the test
session, so these tests drive parse_args() and render_smallpt() directly.
"""

import pytest
from PIL import Image as PILImage


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        from src.pathtracer.cli import parse_args

        args = parse_args([])
        assert (args.width, args.height) == (1024, 768)
        assert args.spp == 10
        assert args.passes is None
        assert args.deadline is None
        assert args.seed == 0
        assert args.output == "smallpt.png"
        assert args.tone_map == "none"
        assert args.arch == "cpu"
        assert not args.verbose

    def test_options(self):
        from src.pathtracer.cli import parse_args

        args = parse_args(
            [
                "--width", "320",
                "--height", "240",
                "--spp", "4",
                "--passes", "8",
                "--deadline", "2.5",
                "--seed", "9",
                "--output", "out.png",
                "--tone-map", "aces",
                "--arch", "vulkan",
                "--verbose",
            ]
        )
        assert (args.width, args.height, args.spp, args.passes) == (320, 240, 4, 8)
        assert args.deadline == 2.5
        assert args.seed == 9
        assert args.output == "out.png"
        assert args.tone_map == "aces"
        assert args.arch == "vulkan"
        assert args.verbose

    @pytest.mark.parametrize(
        "argv", [["--arch", "tpu"], ["--tone-map", "filmic"], ["--width", "wide"]]
    )
    def test_invalid_choices_exit(self, argv):
        from src.pathtracer.cli import parse_args

        with pytest.raises(SystemExit):
            parse_args(argv)


class TestRenderSmallpt:
    """Tests for render_smallpt."""

    def test_renders_passes_and_saves(self, tmp_path):
        from src.pathtracer.cli import parse_args, render_smallpt
        from src.pathtracer.core.integrator import get_pass_count

        output = tmp_path / "smallpt.png"
        args = parse_args(
            ["--width", "8", "--height", "6", "--spp", "1", "--passes", "2"]
            + ["--output", str(output)]
        )
        assert render_smallpt(args) == output
        assert get_pass_count() == 2

        with PILImage.open(output) as img:
            assert img.size == (8, 6)
            assert img.mode == "RGB"

    def test_single_pass_by_default(self, tmp_path):
        from src.pathtracer.cli import parse_args, render_smallpt
        from src.pathtracer.core.integrator import get_pass_count

        args = parse_args(["--width", "4", "--height", "3", "--spp", "1"])
        args.output = str(tmp_path / "default.png")
        render_smallpt(args)
        assert get_pass_count() == 1

    def test_deadline_with_pass_cap(self, tmp_path):
        from src.pathtracer.cli import parse_args, render_smallpt
        from src.pathtracer.core.integrator import get_pass_count

        args = parse_args(
            ["--width", "4", "--height", "3", "--spp", "1", "--deadline", "600", "--passes", "3"]
        )
        args.output = str(tmp_path / "deadline.png")
        render_smallpt(args)
        assert get_pass_count() == 3

    @pytest.mark.parametrize(
        "argv",
        [["--spp", "0"], ["--width", "0"], ["--width", "5000"], ["--seed", "-1"]],
    )
    def test_invalid_configuration_raises(self, tmp_path, argv):
        from src.pathtracer.cli import parse_args, render_smallpt

        args = parse_args(argv + ["--output", str(tmp_path / "bad.png")])
        with pytest.raises(ValueError):
            render_smallpt(args)
        assert not (tmp_path / "bad.png").exists()
