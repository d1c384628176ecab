"""Tests for retrying a unit of work on transient storage failures."""

import pytest
from shared.errors import Conflict, TransientStorageError
from shared.persistence.retry import retry_transient


def _flaky(failures):
    calls = {"count": 0}

    @retry_transient(max_attempts=3, backoff=0)
    def operation():
        calls["count"] += 1
        if calls["count"] <= failures:
            raise TransientStorageError("deadlock detected")
        return "done"

    return operation, calls


class TestRetryTransient:
    def test_returns_after_transient_failures(self):
        operation, calls = _flaky(failures=2)
        assert operation() == "done"
        assert calls["count"] == 3

    def test_exhausted_retries_surface_as_conflict(self):
        operation, calls = _flaky(failures=5)
        with pytest.raises(Conflict):
            operation()
        assert calls["count"] == 3

    def test_max_attempts_can_be_overridden_per_call(self):
        operation, calls = _flaky(failures=5)
        with pytest.raises(Conflict):
            operation(max_attempts=1)
        assert calls["count"] == 1

    def test_other_errors_are_not_retried(self):
        calls = {"count": 0}

        @retry_transient(backoff=0)
        def operation():
            calls["count"] += 1
            raise ValueError("bad input")

        with pytest.raises(ValueError):
            operation()
        assert calls["count"] == 1

    @pytest.mark.parametrize("attempts", [0, -1])
    def test_non_positive_attempts_are_rejected(self, attempts):
        operation, calls = _flaky(failures=0)
        with pytest.raises(ValueError):
            operation(max_attempts=attempts)
        assert calls["count"] == 0

    def test_explicit_none_uses_the_default(self):
        operation, calls = _flaky(failures=2)
        assert operation(max_attempts=None) == "done"
        assert calls["count"] == 3
