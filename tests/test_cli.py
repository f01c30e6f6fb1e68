"""Tests for the command line interface."""
import numpy as np
import pytest

from hctcalc import __version__
from hctcalc.cli import create_parser, main


@pytest.fixture
def red_image(image_file):
    image = np.zeros((20, 20, 3), dtype=np.uint8)
    image[:, :] = [255, 0, 0]
    return image_file(image, "red.png")


class TestCli:
    """Test argument handling and output."""

    def test_parser_defaults(self):
        parsed = create_parser().parse_args(["image.png", "hue"])
        assert parsed.output_type == "hue"
        assert parsed.image_path == "image.png"
        assert parsed.size == 128
        assert parsed.verbose == 0

    def test_options_before_image(self):
        parsed = create_parser().parse_args(["--size", "64", "-vv", "image.png", "tone"])
        assert parsed.output_type == "tone"
        assert parsed.image_path == "image.png"
        assert parsed.size == 64
        assert parsed.verbose == 2

    def test_rejects_unknown_output(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["image.png", "saturation"])

    def test_requires_output_type(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["image.png"])

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert capsys.readouterr().out.strip() == f"hctcalc {__version__}"

    @pytest.mark.parametrize("output_type, expected", [
        ("hue", "27"),
        ("chroma", "113"),
        ("tone", "53"),
    ])
    def test_prints_rounded_component(self, red_image, capsys, output_type, expected):
        assert main([str(red_image), output_type]) == 0
        assert capsys.readouterr().out == f"{expected}\n"

    def test_size_option(self, red_image, capsys):
        assert main(["--size", "64", str(red_image), "hue"]) == 0
        assert capsys.readouterr().out == "27\n"

    def test_small_size_downsamples(self, image_file, capsys):
        image = np.full((50, 50, 3), 255, dtype=np.uint8)
        assert main(["--size", "8", str(image_file(image)), "tone"]) == 0
        assert capsys.readouterr().out == "100\n"

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.png"), "hue"]) == 1
        assert "Error" in capsys.readouterr().err

    def test_invalid_size(self, red_image, capsys):
        assert main(["--size", "0", str(red_image), "hue"]) == 1
        assert "must be >= 1" in capsys.readouterr().err

    def test_undecodable_file(self, tmp_path, capsys):
        path = tmp_path / "bad.png"
        path.write_bytes(b"\x00\x01\x02")
        assert main([str(path), "hue"]) == 1
        assert "Error processing image" in capsys.readouterr().err
