from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class RetryOutcome(Generic[T]):
    value: T
    attempts: int
    used_fallback: bool
    errors: list[str] = field(default_factory=list)


def backoff_delay(attempt: int, base_delay: float) -> float:
    """Delay before retrying after ``attempt`` (1-based) failed."""
    return base_delay * (2 ** (attempt - 1))


async def run_with_backoff(
    operation: Callable[[], Awaitable[T]],
    *,
    fallback: Callable[[], T],
    attempts: int = 3,
    base_delay: float = 0.5,
    call_timeout: float | None = None,
    sleep: Sleep = asyncio.sleep,
    label: str = "",
) -> RetryOutcome[T]:
    """Call ``operation`` up to ``attempts`` times, then use ``fallback``.

    Any exception from the operation, including a per-call timeout, counts as
    transient. Cancellation propagates untouched.
    """
    if attempts < 1:
        raise ValueError("attempts must be >= 1")

    errors: list[str] = []
    for attempt in range(1, attempts + 1):
        try:
            if call_timeout is not None:
                value = await asyncio.wait_for(operation(), timeout=call_timeout)
            else:
                value = await operation()
            return RetryOutcome(value=value, attempts=attempt, used_fallback=False, errors=errors)
        except asyncio.TimeoutError:
            errors.append(f"attempt {attempt}: timed out after {call_timeout}s")
        except Exception as exc:
            errors.append(f"attempt {attempt}: {exc}")

        logger.warning(
            "Generation attempt failed",
            extra={"label": label, "attempt": attempt, "max_attempts": attempts, "error": errors[-1]},
        )
        if attempt < attempts:
            await sleep(backoff_delay(attempt, base_delay))

    logger.warning("Retries exhausted; using fallback", extra={"label": label, "attempts": attempts})
    return RetryOutcome(value=fallback(), attempts=attempts, used_fallback=True, errors=errors)


__all__ = ["run_with_backoff", "RetryOutcome", "backoff_delay"]
