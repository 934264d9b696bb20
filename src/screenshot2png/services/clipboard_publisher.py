import logging
import queue
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from screenshot2png.clipboard import ScreenshotClipboard, get_clipboard
from screenshot2png.models.screenshot import EncodedArtifact

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _PublishRequest:
    artifact: EncodedArtifact
    done: Future


class ClipboardPublisher:
    """Publishes the most recent screenshot to the clipboard.

    Requests are handled one at a time by a dedicated thread; callers block
    until their request is done. A screenshot whose source timestamp is not
    newer than the last published one is dropped, so the clipboard never goes
    back in time. The recency slot is claimed before the clipboard is touched,
    which means a failed publish still shadows older screenshots.
    """

    def __init__(
        self,
        clipboard: Optional[ScreenshotClipboard] = None,
        auto_start: bool = False,
    ) -> None:
        self._clipboard = clipboard
        self._lock = threading.RLock()
        self._state_lock = threading.Lock()
        self._last_published = datetime.min.replace(tzinfo=timezone.utc)
        self._requests: "queue.Queue[Optional[_PublishRequest]]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._is_running = False

        if auto_start:
            self.start()

    @property
    def last_published_timestamp(self) -> datetime:
        with self._state_lock:
            return self._last_published

    @property
    def is_running(self) -> bool:
        return self._is_running

    def start(self) -> None:
        with self._lock:
            if self._is_running:
                return

            if self._clipboard is None:
                self._clipboard = get_clipboard()

            self._is_running = True
            self._thread = threading.Thread(
                target=self._run, name="clipboard-publisher", daemon=True)
            self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        with self._lock:
            if not self._is_running:
                return

            self._is_running = False
            self._requests.put(None)

        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def publish(self, artifact: EncodedArtifact) -> bool:
        """Returns True when the screenshot was placed on the clipboard."""
        request = _PublishRequest(artifact=artifact, done=Future())

        with self._lock:
            if not self._is_running:
                logger.warning("Clipboard publisher is not running, skipping publish")
                return False
            self._requests.put(request)

        return request.done.result()

    def _run(self) -> None:
        while True:
            request = self._requests.get()
            if request is None:
                break

            try:
                published = self._publish_now(request.artifact)
            except Exception as e:
                logger.error(f"Error publishing to clipboard: {e}")
                published = False
            request.done.set_result(published)

    def _publish_now(self, artifact: EncodedArtifact) -> bool:
        timestamp = artifact.source_timestamp

        with self._state_lock:
            if timestamp <= self._last_published:
                logger.info(
                    f"Skipping clipboard for {timestamp.isoformat()}, "
                    f"{self._last_published.isoformat()} is newer")
                return False

            self._last_published = timestamp
            published = self._clipboard.set_screenshot(artifact.png)

        if published:
            logger.info(f"Copied screenshot {timestamp.isoformat()} to clipboard")
        else:
            logger.warning(f"Could not copy screenshot {timestamp.isoformat()} to clipboard")
        return published

    def __enter__(self) -> "ClipboardPublisher":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
