"""Bounded retry policy for transient failures."""

import logging
from dataclasses import dataclass
from time import sleep
from typing import Callable, Literal, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Retry a callable a bounded number of times.

    Attributes:
        max_attempts: Total attempts, including the first
        delay: Seconds to wait before the second attempt
        backoff: "fixed" keeps the delay constant; "exponential" doubles it
            after every failed attempt
        retry_on: Exception types that trigger a retry; anything else
            propagates immediately
        sleeper: Function used to wait (injectable for tests)
    """

    max_attempts: int = 3
    delay: float = 5.0
    backoff: Literal["fixed", "exponential"] = "fixed"
    retry_on: tuple[type[BaseException], ...] = (Exception,)
    sleeper: Callable[[float], None] = sleep

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay < 0:
            raise ValueError("delay must not be negative")

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given (1-based) failed attempt."""
        if self.backoff == "exponential":
            return self.delay * (2 ** (attempt - 1))
        return self.delay

    def call(self, fn: Callable[..., T], *args, description: str = "", **kwargs) -> T:
        """Call ``fn`` until it succeeds or attempts run out.

        Args:
            fn: Callable to invoke
            *args: Positional arguments for fn
            description: Label used in log messages
            **kwargs: Keyword arguments for fn

        Returns:
            Whatever fn returns

        Raises:
            The last exception raised by fn once attempts are exhausted
        """
        label = description or getattr(fn, "__name__", "call")
        for attempt in range(1, self.max_attempts + 1):
            try:
                return fn(*args, **kwargs)
            except self.retry_on as e:
                if attempt == self.max_attempts:
                    raise
                logger.warning(
                    f"{label} failed (attempt {attempt}/{self.max_attempts}): {e}"
                )
                self.sleeper(self.delay_for(attempt))
        raise AssertionError("unreachable")
