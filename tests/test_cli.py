import pytest
from PIL import Image as PILImage

from battery_icon.cli.render_icon import main


def test_renders_icon(tmp_path, bolt_png):
    target = tmp_path / "nested" / "AppIcon.png"
    assert main(["--input", str(bolt_png), "--output", str(target)]) == 0
    with PILImage.open(target) as im:
        assert im.size == (1024, 1024)


def test_flags_reach_configuration(tmp_path, bolt_png):
    target = tmp_path / "icon.png"
    code = main(["--input", str(bolt_png), "--output", str(target),
                 "--threshold", "0.4", "--battery-alpha", "0.5",
                 "--battery-threshold", "0.8"])
    assert code == 0
    with PILImage.open(target) as im:
        assert im.getpixel((540, 500)) == (127, 127, 127, 255)


@pytest.mark.parametrize("argv", [
    ["--output", "x.png"],
    ["--input", "x.png"],
    ["--input", "x.png", "--output", "y.png", "--threshold", "dark"],
    ["--input", "x.png", "--output", "y.png", "--battery-alpha", "1.5"],
    ["--input", "x.png", "--output", "y.png", "--bogus"],
])
def test_bad_arguments_exit_before_processing(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    assert exc.value.code != 0
    assert capsys.readouterr().err


def test_unreadable_input_reports_error(tmp_path, capsys):
    target = tmp_path / "icon.png"
    code = main(["--input", str(tmp_path / "missing.png"), "--output", str(target)])
    assert code == 1
    assert "error: Failed to read image" in capsys.readouterr().err
    assert not target.exists()


@pytest.mark.parametrize("argv, flag", [
    (["--output", "x.png"], "--input"),
    (["--input", "x.png"], "--output"),
])
def test_missing_path_names_the_flag(argv, flag, capsys):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    assert exc.value.code == 2
    assert f"Missing {flag} <path>" in capsys.readouterr().err


def test_malformed_log_level_is_reported(tmp_path, bolt_png, monkeypatch, capsys):
    monkeypatch.setenv("LOG_LEVEL", "loud")
    target = tmp_path / "icon.png"
    code = main(["--input", str(bolt_png), "--output", str(target)])
    assert code == 1
    assert "error: Invalid LOG_LEVEL" in capsys.readouterr().err
    assert not target.exists()
