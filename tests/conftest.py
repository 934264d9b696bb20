import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple

import pytest
from PIL import Image

from screenshot2png.clipboard import ScreenshotClipboard
from screenshot2png.utils.file_times import to_epoch_ns

SCREENSHOT_TIME = datetime(2023, 1, 1, 0, 0, 0, 123000, tzinfo=timezone.utc)


def make_bitmap(path: Path, size: Tuple[int, int] = (8, 6), mtime: Optional[datetime] = None) -> Image.Image:
    width, height = size
    image = Image.new("RGB", size)
    image.putdata([((x * 31) % 256, (y * 47) % 256, (x * y) % 256)
                   for y in range(height) for x in range(width)])
    image.save(path, "BMP")

    if mtime is not None:
        set_mtime(path, mtime)
    return image


def set_mtime(path: Path, timestamp: datetime) -> None:
    ns = to_epoch_ns(timestamp)
    os.utime(path, ns=(ns, ns))


class FakeClipboard(ScreenshotClipboard):

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: List[Tuple[bytes, str]] = []

    def _set_screenshot(self, png: bytes) -> bool:
        if self.fail:
            raise RuntimeError("clipboard is busy")
        self.calls.append((png, threading.current_thread().name))
        return True


@pytest.fixture
def screenshot_time() -> datetime:
    return SCREENSHOT_TIME


@pytest.fixture
def fake_clipboard() -> FakeClipboard:
    return FakeClipboard()
