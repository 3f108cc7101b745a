"""Per-invocation deadline and cancellation signal."""

from __future__ import annotations

import threading
import time

from podinfo_operator.core.errors import CanceledError


class Deadline:
    """A monotonic deadline that can also be canceled explicitly.

    Gateway calls check it before every request and bound the HTTP request
    timeout by :meth:`remaining`.
    """

    def __init__(self, timeout: float | None = None) -> None:
        if timeout is not None and timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {timeout}")
        self._expires_at = None if timeout is None else time.monotonic() + timeout
        self._canceled = threading.Event()

    @classmethod
    def never(cls) -> Deadline:
        return cls(None)

    def cancel(self) -> None:
        self._canceled.set()

    @property
    def canceled(self) -> bool:
        return self._canceled.is_set()

    def remaining(self) -> float | None:
        """Seconds left, ``0.0`` when expired, ``None`` when unbounded."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return self.canceled or (remaining is not None and remaining <= 0)

    def check(self, what: str) -> None:
        """Raise ``CanceledError`` if the deadline has passed or was canceled."""
        if self.canceled:
            raise CanceledError(f"Canceled before {what}")
        if self.expired:
            raise CanceledError(f"Deadline exceeded before {what}")

    def request_timeout(self, default: float) -> float:
        """HTTP timeout for the next call: *default*, capped by the time left."""
        remaining = self.remaining()
        if remaining is None:
            return default
        return min(default, remaining)
