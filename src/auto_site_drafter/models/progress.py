from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, Field


class PipelineStage(str, Enum):
    validating = "validating"
    resolving = "resolving"
    planning = "planning"
    theming = "theming"
    generating = "generating"
    assembling = "assembling"
    enriching = "enriching"
    scoring = "scoring"
    repairing = "repairing"
    complete = "complete"
    failed = "failed"
    cancelled = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineStage.complete, PipelineStage.failed, PipelineStage.cancelled)


class ProgressError(BaseModel):
    message: str
    stage: str
    code: str | None = None


class ProgressEvent(BaseModel):
    stage: str
    progress: float = Field(ge=0.0, le=100.0)
    message: str
    page: str | None = None
    section: str | None = None
    data: Mapping[str, Any] | None = None
    error: ProgressError | None = None
    ts: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_terminal(self) -> bool:
        return self.stage in ("complete", "error", "cancelled")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


__all__ = ["PipelineStage", "ProgressEvent", "ProgressError"]
