from __future__ import annotations

import time

import pytest

from podinfo_operator.core.deadline import Deadline
from podinfo_operator.core.errors import CanceledError, UnavailableError


class TestDeadline:
    def test_never_is_unbounded(self) -> None:
        deadline = Deadline.never()

        assert deadline.remaining() is None
        assert not deadline.expired
        assert deadline.request_timeout(10.0) == 10.0
        deadline.check("get")

    def test_request_timeout_capped_by_remaining(self) -> None:
        deadline = Deadline(5.0)
        assert deadline.request_timeout(10.0) <= 5.0
        assert deadline.request_timeout(1.0) == 1.0

    def test_expired(self) -> None:
        deadline = Deadline(0.0)
        time.sleep(0.001)

        assert deadline.expired
        assert deadline.remaining() == 0.0
        with pytest.raises(CanceledError, match="Deadline exceeded before get"):
            deadline.check("get")

    def test_cancel(self) -> None:
        deadline = Deadline(60.0)
        deadline.cancel()

        assert deadline.canceled
        assert deadline.expired
        with pytest.raises(CanceledError, match="Canceled before"):
            deadline.check("create")

    def test_canceled_is_retryable(self) -> None:
        assert issubclass(CanceledError, UnavailableError)
        assert CanceledError.retryable

    def test_negative_timeout_rejected(self) -> None:
        with pytest.raises(ValueError, match="timeout"):
            Deadline(-1.0)
