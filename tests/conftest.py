from __future__ import annotations

import asyncio
import json
from collections import Counter
from pathlib import Path
from typing import Any

import pytest

from auto_site_drafter.dictionaries import DEFAULT_SECTIONS
from auto_site_drafter.errors import TransientGenerationError
from auto_site_drafter.generative import GenerationRequest, GenerationResponse
from auto_site_drafter.models.content import SectionContent

FIXTURE_DIR = Path(__file__).resolve().parent.parent / "data" / "requirements"


def load_fixture(name: str) -> dict[str, Any]:
    fixture_path = FIXTURE_DIR / f"{name}.json"
    return json.loads(fixture_path.read_text(encoding="utf-8"))


async def no_sleep(delay: float) -> None:
    return None


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def copy_for(request: GenerationRequest) -> dict[str, Any]:
    context = request.context
    kind = context.get("section_kind", "section")
    page = context.get("page", "index")
    power = (context.get("power_words") or ["distinctive"])[0]
    sentences = [
        f"Our {kind} story on the {page} page is {power} from the first sketch to the final reveal.",
        f"Every {kind} detail for {page} visitors is planned around how people actually live and work.",
        f"We keep the {kind} process on {page} calm, transparent and focused on outcomes that last for years.",
        f"Clients tell us the {kind} experience on {page} felt personal, precise and genuinely enjoyable.",
    ]
    return {
        "heading": f"{kind.title()} highlights for {page}",
        "subheading": f"A closer look at {kind}",
        "body": " ".join(sentences),
        "bullets": [f"{kind} point one", f"{kind} point two"],
        "cta_label": "Start your project",
    }


def fallback_section(generator, requirements, profile, page, section, *, attempts: int = 3) -> SectionContent:
    """Section content exactly as the generator builds it once every attempt failed."""
    copy = generator.fallback_copy(requirements, profile, page, section)
    definition = DEFAULT_SECTIONS[section.kind]
    images = (generator.fallback_image(requirements, profile, definition),) if definition.image_slot else ()
    return SectionContent(
        page=page.slug,
        kind=section.kind,
        variant=section.variant,
        heading=copy["heading"],
        subheading=copy["subheading"],
        body=copy["body"],
        bullets=tuple(copy["bullets"]),
        cta_label=copy["cta_label"],
        images=images,
        source="fallback",
        attempts=attempts,
    )


class FakeCapability:
    """Deterministic capability returning distinct copy per section."""

    def __init__(self) -> None:
        self.calls: Counter[str] = Counter()

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.calls[request.kind] += 1
        if request.kind == "image":
            return GenerationResponse(content=f"Photograph for {request.context.get('section_kind')}")
        return GenerationResponse(content=json.dumps(copy_for(request)))


class FailingCapability:
    def __init__(self) -> None:
        self.calls = 0

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.calls += 1
        raise TransientGenerationError("service unavailable", stage="generating")


class FlakyCapability(FakeCapability):
    """Fails the first ``failures`` text calls, then behaves like FakeCapability."""

    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        if request.kind == "text" and self.calls["text_failed"] < self.failures:
            self.calls["text_failed"] += 1
            raise TransientGenerationError("rate limited", stage="generating")
        return await super().generate(request)


class SlowCapability(FakeCapability):
    def __init__(self, delay: float) -> None:
        super().__init__()
        self.delay = delay
        self.in_flight = 0
        self.peak = 0

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            return await super().generate(request)
        finally:
            self.in_flight -= 1


@pytest.fixture
def aurora_payload() -> dict[str, Any]:
    return load_fixture("aurora-design-studio")


@pytest.fixture
def bistro_payload() -> dict[str, Any]:
    return load_fixture("harbor-bistro")
