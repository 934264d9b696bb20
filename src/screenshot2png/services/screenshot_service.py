import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional, Set

from screenshot2png.models.screenshot import ScreenshotEvent
from screenshot2png.services.clipboard_publisher import ClipboardPublisher
from screenshot2png.services.conversion import (
    ConversionPipeline,
    PermanentConversionError,
    UnidentifiedSourceError,
)
from screenshot2png.utils.retry import RetryError, RetryExecutor, RetryPolicy

logger = logging.getLogger(__name__)


def _unlink(path: Path) -> None:
    path.unlink()


class ScreenshotService:
    """Runs the convert, publish and delete steps for each watched screenshot.

    Every event gets its own worker thread. Conversion is retried until it
    succeeds or the source turns out not to be an image. A file Pillow cannot
    identify is given ``unidentified_attempts`` tries before that verdict.
    Once converted, the raw file is deleted on a separate worker under the
    bounded policy while the screenshot is published to the clipboard.
    """

    def __init__(
        self,
        pipeline: ConversionPipeline,
        conversion_policy: RetryPolicy,
        deletion_policy: RetryPolicy,
        publisher: Optional[ClipboardPublisher] = None,
        delete: Callable[[Path], None] = _unlink,
        sleep: Callable[[float], None] = time.sleep,
        unidentified_attempts: int = 30,
    ) -> None:
        self.pipeline = pipeline
        self.unidentified_attempts = unidentified_attempts
        self.publisher = publisher
        self._delete = delete
        self._conversion = RetryExecutor(
            conversion_policy, give_up_on=(PermanentConversionError,), sleep=sleep)
        self._deletion = RetryExecutor(deletion_policy, sleep=sleep)
        self._lock = threading.Lock()
        self._workers: Set[threading.Thread] = set()

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._workers)

    def submit(self, event: ScreenshotEvent) -> threading.Thread:
        return self._spawn(self.handle, event, name=f"convert-{event.path.name}")

    def handle(self, event: ScreenshotEvent) -> Optional[Path]:
        source = event.path
        try:
            destination, artifact = self._conversion.run(
                self._convert_attempts(source), f"Converting {source}")
        except PermanentConversionError as e:
            logger.error(f"Giving up on {source}, leaving it in place: {e}")
            return None

        logger.info(f"Finished processing {source}")

        self._spawn(self.delete_source, source, name=f"delete-{source.name}")

        if self.publisher is not None:
            self.publisher.publish(artifact)

        return destination

    def _convert_attempts(self, source: Path) -> Callable:
        unidentified = 0

        def attempt():
            nonlocal unidentified
            try:
                return self.pipeline.convert(source)
            except UnidentifiedSourceError as e:
                unidentified += 1
                if unidentified >= self.unidentified_attempts:
                    raise PermanentConversionError(
                        f"{source} is not an image after {unidentified} attempts") from e
                raise

        return attempt

    def delete_source(self, path: Path) -> bool:
        def attempt() -> None:
            logger.info(f"Attempting to delete {path}")
            try:
                self._delete(path)
            except FileNotFoundError:
                logger.debug(f"{path} is already gone")

        try:
            self._deletion.run(attempt, f"Deleting {path}")
        except RetryError as e:
            logger.error(f"Giving up deleting {path}: {e}")
            return False

        logger.info(f"Deleted {path}")
        return True

    def drain(self, timeout: float) -> bool:
        """Waits for in-flight workers; True when none are left."""
        deadline = time.monotonic() + timeout
        while True:
            with self._lock:
                workers = list(self._workers)
            if not workers:
                return True

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.warning(f"{len(workers)} screenshot task(s) still running")
                return False
            workers[0].join(timeout=remaining)

    def _spawn(self, target: Callable, *args, name: str) -> threading.Thread:
        def run() -> None:
            try:
                target(*args)
            except Exception as e:
                logger.error(f"Unexpected error in {name}: {e}")
            finally:
                with self._lock:
                    self._workers.discard(threading.current_thread())

        thread = threading.Thread(target=run, name=name, daemon=True)
        with self._lock:
            self._workers.add(thread)
        thread.start()
        return thread
