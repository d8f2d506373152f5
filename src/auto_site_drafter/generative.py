from __future__ import annotations

from typing import Any, Literal, Mapping, Protocol

from pydantic import BaseModel, Field


class GenerationRequest(BaseModel):
    kind: Literal["text", "image"]
    prompt: str
    context: Mapping[str, Any] = Field(default_factory=dict)


class GenerationResponse(BaseModel):
    content: str


class GenerativeCapability(Protocol):
    """Prompt-in/content-out contract for the external generative service.

    Implementations return a response or raise; every exception is treated as
    a transient failure by the retry policy.
    """

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        ...


__all__ = ["GenerationRequest", "GenerationResponse", "GenerativeCapability"]
