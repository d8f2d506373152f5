from __future__ import annotations

import uuid
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    INVALID_REQUIREMENTS = "INVALID_REQUIREMENTS"
    GENERATION_TRANSIENT = "GENERATION_TRANSIENT"
    GENERATION_FAILED = "GENERATION_FAILED"
    RUN_TIMEOUT = "RUN_TIMEOUT"
    ORCHESTRATION_ERROR = "ORCHESTRATION_ERROR"


class PipelineError(Exception):
    """Base error for the generation pipeline."""

    code = ErrorCode.ORCHESTRATION_ERROR
    retryable = False

    def __init__(self, message: str, *, stage: str | None = None, hint: str | None = None) -> None:
        self.error_id = str(uuid.uuid4())
        self.message = message
        self.stage = stage
        self.hint = hint
        super().__init__(message)

    def model_dump(self) -> dict[str, Any]:
        return {
            "error_id": self.error_id,
            "code": self.code.value,
            "message": self.message,
            "stage": self.stage,
            "hint": self.hint,
            "retryable": self.retryable,
        }

    @property
    def http_status(self) -> int:
        mapping = {
            ErrorCode.INVALID_REQUIREMENTS: 422,
            ErrorCode.GENERATION_TRANSIENT: 503,
            ErrorCode.GENERATION_FAILED: 502,
            ErrorCode.RUN_TIMEOUT: 504,
            ErrorCode.ORCHESTRATION_ERROR: 500,
        }
        return mapping.get(self.code, 500)


class RequirementsValidationError(PipelineError):
    code = ErrorCode.INVALID_REQUIREMENTS

    def __init__(self, message: str, *, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message, stage="validating")
        self.errors = errors or []

    def model_dump(self) -> dict[str, Any]:
        payload = super().model_dump()
        payload["errors"] = self.errors
        return payload


class TransientGenerationError(PipelineError):
    """A single generative call failed; callers retry and then fall back."""

    code = ErrorCode.GENERATION_TRANSIENT
    retryable = True


class TotalGenerationFailure(PipelineError):
    code = ErrorCode.GENERATION_FAILED


class PipelineTimeoutError(PipelineError):
    code = ErrorCode.RUN_TIMEOUT


class InvalidTransitionError(PipelineError):
    code = ErrorCode.ORCHESTRATION_ERROR


class RunCancelled(Exception):
    """Raised internally when the caller cancels a run; not an error outcome."""

    def __init__(self, stage: str) -> None:
        self.stage = stage
        super().__init__(f"run cancelled during {stage}")


__all__ = [
    "ErrorCode",
    "PipelineError",
    "RequirementsValidationError",
    "TransientGenerationError",
    "TotalGenerationFailure",
    "PipelineTimeoutError",
    "InvalidTransitionError",
    "RunCancelled",
]
