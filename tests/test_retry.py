from __future__ import annotations

import asyncio
import logging

import pytest

from capitol_fetcher.retry import with_retry


class _Recorder:
    def __init__(self):
        self.sleeps: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)


def _flaky(failures: int, *, exc=RuntimeError):
    calls = {"n": 0}

    async def op():
        calls["n"] += 1
        if calls["n"] <= failures:
            raise exc(f"boom {calls['n']}")
        return "ok"

    return op, calls


def test_always_failing_operation_runs_max_retries_times_then_raises():
    rec = _Recorder()
    op, calls = _flaky(failures=100)

    with pytest.raises(RuntimeError, match="boom 4"):
        asyncio.run(with_retry(op, max_retries=4, delay_ms=250, sleep=rec.sleep))

    assert calls["n"] == 4
    # fixed delay, and no sleep after the final attempt
    assert rec.sleeps == [0.25, 0.25, 0.25]


def test_succeeds_after_transient_failures():
    rec = _Recorder()
    op, calls = _flaky(failures=2)

    out = asyncio.run(with_retry(op, max_retries=5, delay_ms=100, sleep=rec.sleep))

    assert out == "ok"
    assert calls["n"] == 3
    assert rec.sleeps == [0.1, 0.1]


def test_zero_retries_means_single_attempt():
    rec = _Recorder()
    op, calls = _flaky(failures=1)

    with pytest.raises(RuntimeError):
        asyncio.run(with_retry(op, max_retries=0, delay_ms=100, sleep=rec.sleep))

    assert calls["n"] == 1
    assert rec.sleeps == []


def test_errors_outside_retry_on_propagate_immediately():
    rec = _Recorder()
    op, calls = _flaky(failures=3, exc=KeyError)

    with pytest.raises(KeyError):
        asyncio.run(with_retry(op, max_retries=3, delay_ms=10, retry_on=(RuntimeError,), sleep=rec.sleep))

    assert calls["n"] == 1


def test_each_failed_attempt_is_logged(caplog):
    rec = _Recorder()
    op, _ = _flaky(failures=1)

    with caplog.at_level(logging.WARNING, logger="capitol_fetcher.retry"):
        asyncio.run(with_retry(op, max_retries=3, delay_ms=0, sleep=rec.sleep))

    assert "Attempt 1/3 failed: boom 1" in caplog.text


def test_negative_max_retries_rejected():
    op, _ = _flaky(failures=0)
    with pytest.raises(ValueError):
        asyncio.run(with_retry(op, max_retries=-1, delay_ms=0))
