import enum
import logging
import threading
from typing import List, Optional, Sequence

from screenshot2png.locator import ProcessLocator
from screenshot2png.models.screenshot import TrackedProcess
from screenshot2png.utils.retry import RetryExecutor, RetryPolicy

logger = logging.getLogger(__name__)


class SupervisorState(enum.Enum):
    SEARCHING = "searching"
    WAITING = "waiting"
    ATTACHED = "attached"
    TERMINATED = "terminated"


class ProcessSupervisor:
    """Keeps the program alive for as long as the watched application runs.

    If nothing is found on the very first search the supervisor waits out a
    grace period once, since the application may still be starting. After
    that, every time a search comes back empty the session is considered
    over and ``terminated`` is set.
    """

    def __init__(
        self,
        locator: ProcessLocator,
        window_classes: Sequence[str],
        grace_period: float = 20.0,
        lookup_policy: RetryPolicy = RetryPolicy.forever(1.0),
    ) -> None:
        self.locator = locator
        self.window_classes: List[str] = list(window_classes)
        self.grace_period = grace_period
        self.terminated = threading.Event()
        self._stop_event = threading.Event()
        self._lookup = RetryExecutor(lookup_policy, sleep=self._stop_event.wait)
        self._state_lock = threading.Lock()
        self._state = SupervisorState.SEARCHING
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> SupervisorState:
        with self._state_lock:
            return self._state

    def _set_state(self, state: SupervisorState) -> None:
        with self._state_lock:
            self._state = state
        logger.debug(f"Supervisor state: {state.value}")

    def start(self) -> None:
        if self._thread is not None:
            return

        self._thread = threading.Thread(
            target=self.run, name="process-supervisor", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        # A blocking wait on the process cannot be interrupted; the thread is
        # a daemon and goes away with the interpreter.
        self._stop_event.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self.terminated.wait(timeout)

    def run(self) -> None:
        first_search = True

        while not self._stop_event.is_set():
            self._set_state(SupervisorState.SEARCHING)
            logger.info("Searching for running application process...")
            process = self._find()

            if process is None:
                if not first_search:
                    break

                first_search = False
                self._set_state(SupervisorState.WAITING)
                logger.info(
                    f"Did not find any running application process. Waiting {self.grace_period:g}s...")
                self._stop_event.wait(self.grace_period)
                continue

            first_search = False
            self._set_state(SupervisorState.ATTACHED)
            logger.info(
                f"Attached to process {process.pid} (window class {process.window_class})")
            self._wait_for_exit(process)
            logger.info(f"Process {process.pid} exited")

        self._set_state(SupervisorState.TERMINATED)
        logger.info("No running application process found. Exiting!")
        self.terminated.set()

    def _find(self) -> Optional[TrackedProcess]:
        # A failed lookup is retried; only a lookup that completed without a
        # match may end the session.
        def attempt() -> Optional[TrackedProcess]:
            if self._stop_event.is_set():
                return None
            return self.locator.find_by_window_class(self.window_classes)

        return self._lookup.run(attempt, "Process lookup")

    def _wait_for_exit(self, process: TrackedProcess) -> None:
        try:
            self.locator.wait_for_exit(process)
        except Exception as e:
            logger.error(f"Error waiting for process {process.pid}: {e}")
