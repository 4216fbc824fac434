"""
Retry Policy and Cancellation - Extract Layer

Bounded exponential backoff shared by every retryable failure kind, and a
cooperative cancellation token checked before each request and each wait.
"""

import math
import threading
import time
from dataclasses import dataclass
from typing import Any, Optional

from .errors import FetchError, FetchErrorKind

MAX_RETRIES = 3
BACKOFF_BASE = 2


@dataclass(frozen=True)
class RetryPolicy:
    """Per-request retry budget; the counter resets for every page"""

    max_retries: int = MAX_RETRIES
    backoff_base: float = BACKOFF_BASE

    def can_retry(self, retry_count: int) -> bool:
        return retry_count < self.max_retries

    def backoff(self, retry_count: int) -> float:
        """Seconds to wait before retry number ``retry_count + 1``"""
        return float(self.backoff_base**retry_count)


def retry_after_seconds(body: Any) -> Optional[float]:
    """Read the ``retry_after`` hint from a 429 body, if it is usable"""
    if not isinstance(body, dict):
        return None
    value = body.get("retry_after")
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        seconds = float(value)
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds


class CancellationToken:
    """Cooperative cancellation for one acquisition run

    Cancelled either explicitly via cancel() or implicitly once the
    optional timeout (seconds from construction) has elapsed.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without one"""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_cancelled(self, page: Optional[int] = None):
        if self.cancelled:
            raise _cancelled(page)

    def sleep(self, seconds: float, page: Optional[int] = None):
        """Wait for ``seconds``, returning early with FetchError if cancelled"""
        self.raise_if_cancelled(page)
        remaining = self.remaining()
        if remaining is not None and remaining < seconds:
            # The deadline falls inside this wait
            self._event.wait(remaining)
            raise _cancelled(page)
        if self._event.wait(seconds):
            raise _cancelled(page)


def _cancelled(page: Optional[int]) -> FetchError:
    return FetchError(
        f"Acquisition cancelled (page {page})",
        FetchErrorKind.CANCELLED,
        page=page,
    )
