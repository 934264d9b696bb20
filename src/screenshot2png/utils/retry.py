import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryError(Exception):
    """Raised when a bounded policy has used up all of its attempts."""

    def __init__(self, description: str, attempts: int, last_error: BaseException):
        super().__init__(
            f"{description} failed after {attempts} attempts: {last_error}")
        self.description = description
        self.attempts = attempts
        self.last_error = last_error


@dataclass(frozen=True)
class RetryPolicy:
    """Delays between attempts.

    A bounded policy makes ``len(delays) + 1`` attempts. An unbounded policy
    keeps retrying forever and reuses the last delay once the sequence runs out.
    """
    delays: Tuple[float, ...]
    unbounded: bool = False

    def __post_init__(self) -> None:
        if not self.delays:
            raise ValueError("RetryPolicy needs at least one delay")
        if any(delay < 0 for delay in self.delays):
            raise ValueError("RetryPolicy delays must not be negative")
        object.__setattr__(self, "delays", tuple(self.delays))

    @classmethod
    def forever(cls, delay: float) -> "RetryPolicy":
        return cls(delays=(delay,), unbounded=True)

    @classmethod
    def bounded(cls, delays: Sequence[float]) -> "RetryPolicy":
        return cls(delays=tuple(delays), unbounded=False)

    @property
    def max_attempts(self) -> Optional[int]:
        return None if self.unbounded else len(self.delays) + 1

    def delay_for(self, retry: int) -> Optional[float]:
        """Delay before retry number ``retry`` (0-based), None when out of retries."""
        if retry < len(self.delays):
            return self.delays[retry]
        if self.unbounded:
            return self.delays[-1]
        return None


class RetryExecutor:

    def __init__(
        self,
        policy: RetryPolicy,
        give_up_on: Tuple[Type[BaseException], ...] = (),
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.policy = policy
        self.give_up_on = give_up_on
        self._sleep = sleep

    def run(self, operation: Callable[[], T], description: str = "operation") -> T:
        retry = 0
        while True:
            try:
                return operation()
            except self.give_up_on:
                raise
            except Exception as e:
                delay = self.policy.delay_for(retry)
                if delay is None:
                    raise RetryError(description, retry + 1, e) from e

                retry += 1
                logger.warning(
                    f"{description} failed (attempt {retry}): {e}; retrying in {delay:.3f}s")
                self._sleep(delay)
