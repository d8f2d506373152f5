import asyncio

import pytest

from auto_site_drafter.errors import TransientGenerationError
from auto_site_drafter.retry import backoff_delay, run_with_backoff

from conftest import RecordingSleep


def test_backoff_doubles_each_attempt():
    assert [backoff_delay(attempt, 0.5) for attempt in (1, 2, 3)] == [0.5, 1.0, 2.0]


@pytest.mark.asyncio
async def test_success_after_transient_failures():
    sleep = RecordingSleep()
    calls = 0

    async def operation():
        nonlocal calls
        calls += 1
        if calls < 3:
            raise TransientGenerationError("busy")
        return "ok"

    outcome = await run_with_backoff(operation, fallback=lambda: "fallback", attempts=3, sleep=sleep)

    assert outcome.value == "ok"
    assert outcome.attempts == 3
    assert not outcome.used_fallback
    assert len(outcome.errors) == 2
    assert sleep.delays == [0.5, 1.0]


@pytest.mark.asyncio
async def test_fallback_after_exhausting_attempts():
    sleep = RecordingSleep()

    async def operation():
        raise RuntimeError("boom")

    outcome = await run_with_backoff(operation, fallback=lambda: "fallback", attempts=3, base_delay=0.1, sleep=sleep)

    assert outcome.value == "fallback"
    assert outcome.used_fallback
    assert outcome.attempts == 3
    # No sleep after the final attempt
    assert sleep.delays == [0.1, 0.2]


@pytest.mark.asyncio
async def test_call_timeout_counts_as_transient_failure():
    sleep = RecordingSleep()

    async def operation():
        await asyncio.sleep(1)
        return "late"

    outcome = await run_with_backoff(
        operation,
        fallback=lambda: "fallback",
        attempts=2,
        call_timeout=0.01,
        sleep=sleep,
    )

    assert outcome.used_fallback
    assert all("timed out" in error for error in outcome.errors)


@pytest.mark.asyncio
async def test_attempts_must_be_positive():
    async def operation():
        return "ok"

    with pytest.raises(ValueError):
        await run_with_backoff(operation, fallback=lambda: "fallback", attempts=0)
