from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any, AsyncIterator

from fastapi import Body, FastAPI, HTTPException, Response
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from auto_site_drafter.config import PipelineSettings
from auto_site_drafter.errors import RequirementsValidationError, TransientGenerationError
from auto_site_drafter.generative import GenerationRequest, GenerationResponse, GenerativeCapability
from auto_site_drafter.logging_config import setup_logging
from auto_site_drafter.models.progress import ProgressEvent
from auto_site_drafter.models.run import RunRecord, RunStatus
from auto_site_drafter.orchestrator import PipelineOrchestrator
from auto_site_drafter.progress import ProgressEmitter
from auto_site_drafter.run_store import RunStore
from auto_site_drafter.vertex_ai_adapter import VertexAIAdapter


class RunResponse(BaseModel):
    id: str
    status: RunStatus
    stage: str
    progress: float
    errors: list[str]
    summary: dict[str, Any] | None = None

    @staticmethod
    def from_record(record: RunRecord) -> "RunResponse":
        return RunResponse(
            id=record.id,
            status=record.status,
            stage=record.stage,
            progress=record.progress,
            errors=list(record.errors),
            summary=dict(record.summary) if record.summary else None,
        )


class CancelResponse(BaseModel):
    run_id: str
    cancelled: bool


class UnconfiguredCapability:
    """Used when no generative backend is configured; every section falls back."""

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        raise TransientGenerationError("No generative backend configured", stage="generating")


# Environment configuration
ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
PROJECT_ID = os.getenv("PROJECT_ID")
VERTEX_PROJECT_ID = os.getenv("VERTEX_PROJECT_ID") or PROJECT_ID
VERTEX_LOCATION = os.getenv("VERTEX_LOCATION", "us-central1")
VERTEX_MODEL = os.getenv("VERTEX_MODEL", "gemini-1.5-pro")

# Setup logging
setup_logging(environment=ENVIRONMENT, project_id=PROJECT_ID)
logger = logging.getLogger(__name__)


def build_capability() -> GenerativeCapability:
    if VERTEX_PROJECT_ID:
        return VertexAIAdapter(project_id=VERTEX_PROJECT_ID, location=VERTEX_LOCATION, model_name=VERTEX_MODEL)
    logger.warning("VERTEX_PROJECT_ID not set; generation will use template fallbacks")
    return UnconfiguredCapability()


app = FastAPI(title="Auto Site Drafter API", version="0.1.0")

run_store = RunStore()
orchestrator = PipelineOrchestrator(build_capability(), settings=PipelineSettings.from_env())

TERMINAL_STATUS = {
    "complete": RunStatus.completed,
    "error": RunStatus.failed,
    "cancelled": RunStatus.cancelled,
}


def _track(run_id: str, event: ProgressEvent) -> None:
    status = TERMINAL_STATUS.get(event.stage, RunStatus.in_progress)
    run_store.update_run(
        run_id,
        status=status,
        stage=event.stage,
        progress=event.progress,
        summary=event.data if event.stage == "complete" else None,
        errors=[event.error.message] if event.error else None,
    )


@app.post("/v1/sites:generate")
async def generate_site(payload: dict[str, Any] = Body(...)) -> Response:
    try:
        requirements = orchestrator.normalizer.normalize(payload)
    except RequirementsValidationError as exc:
        return JSONResponse(exc.model_dump(), status_code=exc.http_status)

    run = run_store.create_run(business_name=requirements.business_name)
    cancel_event = run_store.cancel_event(run.id)
    emitter = ProgressEmitter(sink=lambda event: _track(run.id, event))
    task = asyncio.create_task(
        orchestrator.run(requirements, emitter=emitter, cancel_event=cancel_event, run_id=run.id)
    )

    async def _events() -> AsyncIterator[str]:
        try:
            async for event in emitter.stream():
                body = {"run_id": run.id, **event.to_wire()}
                yield f"data: {json.dumps(body, default=str)}\n\n"
        finally:
            if not task.done():
                # Client went away; stop the run instead of leaving it orphaned.
                cancel_event.set()
            await task

    return StreamingResponse(
        _events(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
            "X-Run-Id": run.id,
        },
    )


@app.post("/v1/runs/{run_id}:cancel", response_model=CancelResponse)
async def cancel_run(run_id: str) -> CancelResponse:
    if run_store.get_run(run_id) is None:
        raise HTTPException(status_code=404, detail="Run not found")
    return CancelResponse(run_id=run_id, cancelled=run_store.request_cancel(run_id))


@app.get("/v1/runs/{run_id}", response_model=RunResponse)
async def get_run(run_id: str) -> RunResponse:
    record = run_store.get_run(run_id)
    if not record:
        raise HTTPException(status_code=404, detail="Run not found")
    return RunResponse.from_record(record)


@app.get("/health")
async def healthcheck() -> JSONResponse:
    return JSONResponse({"status": "ok"})
