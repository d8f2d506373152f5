from __future__ import annotations

import asyncio
import re
import threading
import uuid
from datetime import datetime
from typing import Any, Dict, Mapping

from .models.run import RunRecord, RunStatus


class RunStore:
    """In-memory registry of pipeline runs and their cancellation handles."""

    def __init__(self) -> None:
        self._runs: Dict[str, RunRecord] = {}
        self._cancel_events: Dict[str, asyncio.Event] = {}
        self._lock = threading.Lock()

    def create_run(self, *, business_name: str | None) -> RunRecord:
        with self._lock:
            run_id = self._generate_id(business_name)
            run = RunRecord(id=run_id, status=RunStatus.queued, business_name=business_name)
            self._runs[run_id] = run
            self._cancel_events[run_id] = asyncio.Event()
            return run

    def get_run(self, run_id: str) -> RunRecord | None:
        with self._lock:
            return self._runs.get(run_id)

    def cancel_event(self, run_id: str) -> asyncio.Event:
        with self._lock:
            return self._cancel_events[run_id]

    def request_cancel(self, run_id: str) -> bool:
        with self._lock:
            run = self._runs.get(run_id)
            if run is None or run.status in (RunStatus.completed, RunStatus.failed, RunStatus.cancelled):
                return False
            self._cancel_events[run_id].set()
            return True

    def update_run(
        self,
        run_id: str,
        *,
        status: RunStatus | None = None,
        stage: str | None = None,
        progress: float | None = None,
        summary: Mapping[str, Any] | None = None,
        errors: list[str] | None = None,
    ) -> RunRecord:
        with self._lock:
            run = self._runs[run_id]
            if status is not None:
                run.status = status
            if stage is not None:
                run.stage = stage
            if progress is not None:
                run.progress = progress
            if summary is not None:
                run.summary = summary
            if errors is not None:
                run.errors = list(errors)
            run.updated_at = datetime.utcnow()
            self._runs[run_id] = run
            return run

    def _generate_id(self, business_name: str | None) -> str:
        ts = datetime.utcnow().strftime("%Y%m%d%H%M%S")
        suffix = uuid.uuid4().hex[:6]
        safe = re.sub(r"[^a-z0-9]+", "-", (business_name or "").lower()).strip("-")[:24]
        if safe:
            return f"run_{safe}_{suffix}"
        return f"run_{ts}_{suffix}"


__all__ = ["RunStore"]
