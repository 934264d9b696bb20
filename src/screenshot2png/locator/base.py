import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import psutil

from screenshot2png.models.screenshot import TrackedProcess

logger = logging.getLogger(__name__)


class ProcessLocator(ABC):
    """Finds a running process by the class name of one of its top-level windows."""

    @abstractmethod
    def find_by_window_class(self, class_names: Sequence[str]) -> Optional[TrackedProcess]:
        pass

    def wait_for_exit(self, process: TrackedProcess) -> None:
        """Blocks until ``process`` has exited."""
        try:
            psutil.Process(process.pid).wait()
        except psutil.NoSuchProcess:
            logger.debug(f"Process {process.pid} already exited")
