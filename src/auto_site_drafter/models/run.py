from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, Field


class RunStatus(str, Enum):
    queued = "QUEUED"
    in_progress = "IN_PROGRESS"
    completed = "COMPLETED"
    failed = "FAILED"
    cancelled = "CANCELLED"


class RunRecord(BaseModel):
    id: str
    status: RunStatus
    stage: str = "validating"
    progress: float = 0.0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    business_name: str | None = None
    errors: Sequence[str] = Field(default_factory=list)
    summary: Mapping[str, Any] | None = None


__all__ = ["RunRecord", "RunStatus"]
