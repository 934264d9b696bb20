
import pytest

from conftest import FakeClipboard, make_bitmap
from screenshot2png.locator import ProcessLocator
from screenshot2png.main import Screenshot2PngApp, build_settings, parse_args
from screenshot2png.models.settings import AppSettings


class NothingRunning(ProcessLocator):
    def find_by_window_class(self, class_names):
        return None


def test_parse_args_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("SCREENSHOT2PNG_OUTPUT_DIR", raising=False)
    args = parse_args([str(tmp_path)])
    settings = build_settings(args)

    assert settings.input_dir == tmp_path
    assert settings.output_dir == tmp_path
    assert settings.convert_existing is True
    assert settings.use_clipboard is True
    assert settings.watch_pattern == "gw*.bmp"


def test_parse_args_switches(tmp_path):
    args = parse_args([
        str(tmp_path), "-o", str(tmp_path / "out"),
        "--no-convert-existing", "--no-use-clipboard", "--grace-period", "2.5",
    ])
    settings = build_settings(args)

    assert settings.output_dir == tmp_path / "out"
    assert settings.convert_existing is False
    assert settings.use_clipboard is False
    assert settings.startup_grace_period == 2.5


def test_policies_come_from_settings(tmp_path):
    settings = AppSettings(input_dir=tmp_path)

    assert settings.conversion_policy().unbounded
    assert settings.conversion_policy().delays == (0.1,)
    assert settings.deletion_policy().delays == (0.5, 1.0, 5.0)
    assert settings.deletion_policy().max_attempts == 4
    assert settings.lookup_policy().unbounded
    assert settings.lookup_policy().delays == (1.0,)
    assert settings.unidentified_attempts == 30


def test_directory_setup_failure_is_fatal(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    app = Screenshot2PngApp(
        AppSettings(input_dir=blocker / "screens", use_clipboard=False),
        locator=NothingRunning(),
    )

    with pytest.raises(OSError):
        app.start()
    assert not app.running


def test_run_forever_backfills_and_exits_without_game(tmp_path, screenshot_time):
    input_dir = tmp_path / "screens"
    input_dir.mkdir()
    source = input_dir / "gw001.bmp"
    make_bitmap(source, mtime=screenshot_time)
    clipboard = FakeClipboard()

    settings = AppSettings(
        input_dir=input_dir,
        output_dir=tmp_path / "png",
        startup_grace_period=0.01,
    )
    app = Screenshot2PngApp(settings, locator=NothingRunning(), clipboard=clipboard)

    app.run_forever()

    assert (tmp_path / "png" / "2023-01-01_00-00-00.123.png").exists()
    assert source.exists()
    assert clipboard.calls == []
    assert not app.running
    assert not app.publisher.is_running
    assert not app.watcher.is_running
