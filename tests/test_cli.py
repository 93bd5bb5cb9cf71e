import logging

import numpy as np
import pytest

from ppmcodec.cli.darken_quadrant import main, parse_args
from ppmcodec.models.header import Encoding
from ppmcodec.repositories.image_repository import ImageRepository
from ppmcodec.repositories.ppm_repository import PPMRepository


@pytest.fixture
def input_ppm(tmp_path):
    path = tmp_path / "input.ppm"
    img = ImageRepository.create_image(np.full((4, 4, 3), 200, dtype=np.uint8))
    PPMRepository().write(path, img, Encoding.RAW)
    return path


def test_darkens_and_writes_raw(input_ppm, tmp_path):
    out = tmp_path / "out.ppm"
    assert main([str(input_ppm), str(out)]) == 0

    assert out.read_bytes().startswith(b"P6\n4 4\n255\n")
    img = PPMRepository().load(out)
    assert (img.pixels[:2, :2] == 100).all()
    assert (img.pixels[2:, :] == 200).all()


def test_ascii_flag_writes_plain_text(input_ppm, tmp_path):
    out = tmp_path / "out.ppm"
    assert main(["-ascii", str(input_ppm), str(out)]) == 0
    content = out.read_bytes()
    assert content.startswith(b"P3\n4 4\n255\n100 100 100 100 100 100 200 200 200 ")


def test_missing_input_fails(tmp_path, caplog):
    with caplog.at_level(logging.ERROR):
        code = main([str(tmp_path / "missing.ppm"), str(tmp_path / "out.ppm")])
    assert code == 1
    assert 'Failed loading "' in caplog.text
    assert not (tmp_path / "out.ppm").exists()


def test_malformed_input_fails(tmp_path, caplog):
    bad = tmp_path / "bad.ppm"
    bad.write_bytes(b"P5\n1 1\n255\n\x00")
    with caplog.at_level(logging.ERROR):
        assert main([str(bad), str(tmp_path / "out.ppm")]) == 1
    assert "Unsupported format" in caplog.text


def test_unwritable_output_fails(input_ppm, tmp_path, caplog):
    with caplog.at_level(logging.ERROR):
        code = main([str(input_ppm), str(tmp_path / "no" / "such" / "dir.ppm")])
    assert code == 1
    assert 'Failed writing "' in caplog.text


@pytest.mark.parametrize("argv", [[], ["only-one"], ["-raw", "a", "b"], ["a", "b", "c"]])
def test_bad_usage_exits_with_2(argv, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    assert exc_info.value.code == 2
    assert "usage: ppm-darken" in capsys.readouterr().err


def test_log_level_from_environment(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    args = parse_args(["in.ppm", "out.ppm"])
    assert args.log_level == "DEBUG"
    assert args.ascii is False


def test_invalid_log_level_in_environment(monkeypatch, capsys):
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(SystemExit) as exc_info:
        main(["in.ppm", "out.ppm"])
    assert exc_info.value.code == 2
    assert "invalid LOG_LEVEL 'VERBOSE'" in capsys.readouterr().err


def test_invalid_codec_setting_fails_cleanly(input_ppm, tmp_path, monkeypatch, caplog):
    monkeypatch.setenv("PPM_ASCII_PIXELS_PER_LINE", "five")
    with caplog.at_level(logging.ERROR):
        assert main([str(input_ppm), str(tmp_path / "out.ppm")]) == 1
    assert "PPM_ASCII_PIXELS_PER_LINE" in caplog.text
