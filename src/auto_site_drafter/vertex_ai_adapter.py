from __future__ import annotations

import json
import logging
from typing import Any

import vertexai
from vertexai.generative_models import GenerationConfig, GenerativeModel

from .errors import TransientGenerationError
from .generative import GenerationRequest, GenerationResponse

logger = logging.getLogger(__name__)

TEXT_SYSTEM_PROMPT = (
    "You are a senior website copywriter. Write concise, specific copy for one "
    "website section and respond with a JSON object containing the keys "
    '"heading", "subheading", "body", "bullets" (array of strings) and "cta_label".'
)

IMAGE_SYSTEM_PROMPT = (
    "You are an art director. Rewrite the image brief into a single detailed "
    "prompt for a photographic image generator. Respond with the prompt text only."
)


class VertexAIAdapter:
    """Generative capability backed by Vertex AI Gemini models."""

    def __init__(
        self,
        *,
        project_id: str,
        location: str = "us-central1",
        model_name: str = "gemini-1.5-pro",
        temperature: float = 0.7,
        max_output_tokens: int = 2048,
    ) -> None:
        """Initialize Vertex AI adapter.

        Args:
            project_id: GCP project ID
            location: Vertex AI location
            model_name: Model name (e.g., "gemini-1.5-pro")
            temperature: Sampling temperature for text requests
            max_output_tokens: Maximum output tokens per call
        """
        self.project_id = project_id
        self.location = location
        self.model_name = model_name
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

        vertexai.init(project=project_id, location=location)

        self._text_model = GenerativeModel(model_name, system_instruction=TEXT_SYSTEM_PROMPT)
        self._image_model = GenerativeModel(model_name, system_instruction=IMAGE_SYSTEM_PROMPT)

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Run one generation request.

        Args:
            request: Text or image request with its structured context

        Returns:
            The generated content

        Raises:
            TransientGenerationError: on any SDK failure or empty output
        """
        model = self._text_model if request.kind == "text" else self._image_model
        generation_config = GenerationConfig(
            temperature=self.temperature if request.kind == "text" else 0.4,
            max_output_tokens=self.max_output_tokens,
            response_mime_type="application/json" if request.kind == "text" else "text/plain",
        )
        prompt = self._render_prompt(request)

        try:
            response = await model.generate_content_async(
                prompt,
                generation_config=generation_config,
            )
            generated_text = response.text
        except Exception as exc:
            logger.warning(
                "Vertex AI call failed",
                extra={"model": self.model_name, "kind": request.kind, "error": str(exc)},
            )
            raise TransientGenerationError(f"Vertex AI call failed: {exc}", stage="generating") from exc

        if not generated_text or not generated_text.strip():
            raise TransientGenerationError("Vertex AI returned empty content", stage="generating")

        logger.info(
            "Generated content with Vertex AI",
            extra={
                "model": self.model_name,
                "kind": request.kind,
                "input_length": len(prompt),
                "output_length": len(generated_text),
            },
        )
        return GenerationResponse(content=generated_text.strip())

    def _render_prompt(self, request: GenerationRequest) -> str:
        if not request.context:
            return request.prompt
        context: dict[str, Any] = dict(request.context)
        return f"{request.prompt}\n\nContext:\n{json.dumps(context, ensure_ascii=False, indent=2, default=str)}"


__all__ = ["VertexAIAdapter"]
