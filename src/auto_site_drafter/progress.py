from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Callable, Mapping

from .models.progress import ProgressError, ProgressEvent

logger = logging.getLogger(__name__)

# Non-terminal events never report completion.
MAX_INFLIGHT_PROGRESS = 99.0

ProgressSink = Callable[[ProgressEvent], None]


class ProgressEmitter:
    """Ordered, observable progress stream for one run.

    Progress is clamped to be non-decreasing, only the terminal ``complete``
    event reaches 100, and nothing is published after the terminal event.
    """

    def __init__(self, *, sink: ProgressSink | None = None) -> None:
        self._sink = sink
        self._queue: asyncio.Queue[ProgressEvent] = asyncio.Queue()
        self._events: list[ProgressEvent] = []
        self._progress = 0.0
        self._closed = False

    @property
    def events(self) -> list[ProgressEvent]:
        return list(self._events)

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def closed(self) -> bool:
        return self._closed

    def emit(
        self,
        stage: str,
        progress: float,
        message: str,
        *,
        page: str | None = None,
        section: str | None = None,
    ) -> ProgressEvent | None:
        value = min(max(progress, self._progress), MAX_INFLIGHT_PROGRESS)
        return self._publish(
            ProgressEvent(stage=stage, progress=value, message=message, page=page, section=section)
        )

    def complete(self, data: Mapping[str, Any], message: str = "Website generated") -> ProgressEvent | None:
        return self._publish(ProgressEvent(stage="complete", progress=100.0, message=message, data=data))

    def fail(self, message: str, stage: str, *, code: str | None = None) -> ProgressEvent | None:
        return self._publish(
            ProgressEvent(
                stage="error",
                progress=self._progress,
                message=message,
                error=ProgressError(message=message, stage=stage, code=code),
            )
        )

    def cancel(self, stage: str) -> ProgressEvent | None:
        return self._publish(
            ProgressEvent(
                stage="cancelled",
                progress=self._progress,
                message=f"Run cancelled during {stage}",
            )
        )

    async def stream(self) -> AsyncIterator[ProgressEvent]:
        """Yield events as they are published, ending after the terminal one."""
        while True:
            event = await self._queue.get()
            yield event
            if event.is_terminal:
                return

    def _publish(self, event: ProgressEvent) -> ProgressEvent | None:
        if self._closed:
            logger.debug("Dropping event after terminal event", extra={"stage": event.stage})
            return None
        self._progress = event.progress
        if event.is_terminal:
            self._closed = True
        self._events.append(event)
        self._queue.put_nowait(event)
        if self._sink is not None:
            self._sink(event)
        return event


__all__ = ["ProgressEmitter", "ProgressSink", "MAX_INFLIGHT_PROGRESS"]
