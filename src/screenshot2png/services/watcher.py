import logging
import os
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, PatternMatchingEventHandler
from watchdog.observers import Observer

from screenshot2png.models.screenshot import ScreenshotEvent

logger = logging.getLogger(__name__)


class ScreenshotEventHandler(PatternMatchingEventHandler):
    """Turns every matching file creation into one ScreenshotEvent.

    Events are neither deduplicated nor coalesced. The file may still be
    written to when the event arrives.
    """

    def __init__(self, pattern: str, on_screenshot: Callable[[ScreenshotEvent], None]) -> None:
        super().__init__(patterns=[pattern], ignore_directories=True, case_sensitive=False)
        self._on_screenshot = on_screenshot

    def on_created(self, event: FileSystemEvent) -> None:
        path = Path(os.fsdecode(event.src_path))
        logger.info(f"Detected {path}")
        try:
            self._on_screenshot(ScreenshotEvent(path=path))
        except Exception as e:
            logger.error(f"Error dispatching {path}: {e}")


class ScreenshotWatcher:

    def __init__(
        self,
        directory: Path,
        pattern: str,
        on_screenshot: Callable[[ScreenshotEvent], None],
    ) -> None:
        self.directory = Path(directory)
        self.pattern = pattern
        self._handler = ScreenshotEventHandler(pattern, on_screenshot)
        self._observer: Optional[Observer] = None

    @property
    def is_running(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

    def start(self) -> None:
        if self._observer is not None:
            return

        self._observer = Observer()
        self._observer.schedule(self._handler, str(self.directory), recursive=False)
        self._observer.start()
        logger.info(f"Started watching {self.directory} for {self.pattern}")

    def stop(self, timeout: float = 5.0) -> None:
        if self._observer is None:
            return

        self._observer.stop()
        self._observer.join(timeout=timeout)
        self._observer = None
        logger.info(f"Stopped watching {self.directory}")

    def __enter__(self) -> "ScreenshotWatcher":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
