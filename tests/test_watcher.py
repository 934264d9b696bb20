import os
import time
from datetime import datetime, timezone

from PIL import Image

from conftest import FakeClipboard, make_bitmap
from screenshot2png.models.screenshot import ScreenshotEvent
from screenshot2png.services.clipboard_publisher import ClipboardPublisher
from screenshot2png.services.conversion import ConversionPipeline
from screenshot2png.services.screenshot_service import ScreenshotService
from screenshot2png.services.watcher import ScreenshotEventHandler, ScreenshotWatcher
from screenshot2png.utils.file_times import to_epoch_ns
from screenshot2png.utils.retry import RetryPolicy


def wait_for(condition, timeout: float = 10.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.05)
    return condition()


def test_handler_matches_pattern_only(tmp_path):
    from watchdog.events import DirCreatedEvent, FileCreatedEvent

    events = []
    handler = ScreenshotEventHandler("gw*.bmp", events.append)

    handler.dispatch(FileCreatedEvent(str(tmp_path / "gw001.bmp")))
    handler.dispatch(FileCreatedEvent(str(tmp_path / "GW002.BMP")))
    handler.dispatch(FileCreatedEvent(str(tmp_path / "gw003.png")))
    handler.dispatch(FileCreatedEvent(str(tmp_path / "shot.bmp")))
    handler.dispatch(DirCreatedEvent(str(tmp_path / "gw004.bmp")))

    assert [event.path.name for event in events] == ["gw001.bmp", "GW002.BMP"]
    assert all(isinstance(event, ScreenshotEvent) for event in events)


def test_discovery_time_is_utc(tmp_path):
    before = datetime.now(timezone.utc)
    event = ScreenshotEvent(path=tmp_path / "gw001.bmp")

    assert event.discovery_time.tzinfo is timezone.utc
    assert before <= event.discovery_time <= datetime.now(timezone.utc)


def test_every_event_is_delivered(tmp_path):
    from watchdog.events import FileCreatedEvent

    events = []
    handler = ScreenshotEventHandler("gw*.bmp", events.append)

    handler.dispatch(FileCreatedEvent(str(tmp_path / "gw001.bmp")))
    handler.dispatch(FileCreatedEvent(str(tmp_path / "gw001.bmp")))

    assert len(events) == 2


def test_dropped_screenshot_is_converted_end_to_end(tmp_path, screenshot_time):
    input_dir = tmp_path / "screens"
    output_dir = tmp_path / "png"
    staging_dir = tmp_path / "staging"
    for directory in (input_dir, output_dir, staging_dir):
        directory.mkdir()

    clipboard = FakeClipboard()
    publisher = ClipboardPublisher(clipboard, auto_start=True)
    service = ScreenshotService(
        ConversionPipeline(output_dir),
        RetryPolicy.forever(0.01),
        RetryPolicy.bounded([0.05, 0.1, 0.5]),
        publisher=publisher,
    )
    watcher = ScreenshotWatcher(input_dir, "gw*.bmp", service.submit)
    watcher.start()

    try:
        staged = staging_dir / "gw001.bmp"
        original = make_bitmap(staged, size=(23, 11), mtime=screenshot_time)
        os.replace(staged, input_dir / "gw001.bmp")

        expected = output_dir / "2023-01-01_00-00-00.123.png"
        assert wait_for(lambda: expected.exists() and not (input_dir / "gw001.bmp").exists())
        assert service.drain(timeout=10)
    finally:
        watcher.stop()
        publisher.stop()

    with Image.open(expected) as converted:
        assert converted.convert("RGB").tobytes() == original.tobytes()
    assert expected.stat().st_mtime_ns == to_epoch_ns(screenshot_time)
    assert clipboard.calls and clipboard.calls[-1][0] == expected.read_bytes()
    assert publisher.last_published_timestamp == screenshot_time
