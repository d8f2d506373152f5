from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

from .dictionaries import DEFAULT_SECTIONS, SectionDefinition
from .errors import TransientGenerationError
from .generative import GenerationRequest, GenerativeCapability
from .models.content import ImageDirective, SectionContent
from .models.industry import IndustryProfile
from .models.requirements import Requirements
from .models.structure import PagePlan, SectionSpec, SitePlan
from .models.theme import GlobalTheme
from .retry import Sleep, run_with_backoff

logger = logging.getLogger(__name__)

CTA_KINDS = frozenset({"hero", "cta", "contact", "pricing"})


@dataclass(frozen=True)
class SectionJob:
    page: PagePlan
    section: SectionSpec
    notes: Sequence[str] = ()

    @property
    def ref(self) -> str:
        return f"{self.page.slug}/{self.section.kind}"


@dataclass(frozen=True)
class SectionResult:
    content: SectionContent
    used_fallback: bool
    errors: Sequence[str] = ()

    @property
    def ref(self) -> str:
        return self.content.ref


@dataclass
class SiteGeneration:
    pages: dict[str, list[SectionResult]] = field(default_factory=dict)
    failed_pages: dict[str, str] = field(default_factory=dict)

    @property
    def results(self) -> list[SectionResult]:
        return [result for results in self.pages.values() for result in results]


SectionCallback = Callable[[SectionResult, int, int], None]


def derive_tagline(requirements: Requirements, profile: IndustryProfile) -> str:
    if requirements.tagline:
        return requirements.tagline
    word = profile.power_words[0].capitalize() if profile.power_words else "Trusted"
    return f"{word} {profile.name.lower()} for {requirements.target_audience}"


def strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


class ContentGenerator:
    """Produce copy and image directives for every planned section."""

    def __init__(
        self,
        capability: GenerativeCapability,
        *,
        sections: Mapping[str, SectionDefinition] = DEFAULT_SECTIONS,
        max_concurrency: int = 4,
        max_attempts: int = 3,
        base_delay: float = 0.5,
        call_timeout: float | None = 20.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._capability = capability
        self._sections = sections
        self._max_concurrency = max_concurrency
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._call_timeout = call_timeout
        self._sleep = sleep

    async def generate_site(
        self,
        requirements: Requirements,
        profile: IndustryProfile,
        theme: GlobalTheme,
        plan: SitePlan,
        *,
        on_section: SectionCallback | None = None,
    ) -> SiteGeneration:
        jobs = [SectionJob(page=page, section=section) for page in plan.pages for section in page.sections]
        outcomes = await self.generate_jobs(requirements, profile, theme, jobs, on_section=on_section)

        generation = SiteGeneration()
        for page in plan.pages:
            generation.pages[page.slug] = []
        for job, outcome in zip(jobs, outcomes):
            slug = job.page.slug
            if slug in generation.failed_pages:
                continue
            if isinstance(outcome, BaseException):
                generation.failed_pages[slug] = f"{job.section.kind}: {outcome}"
                generation.pages.pop(slug, None)
                logger.error(
                    "Page generation failed",
                    exc_info=outcome,
                    extra={"page": slug, "section": job.section.kind},
                )
                continue
            generation.pages[slug].append(outcome)
        return generation

    async def generate_jobs(
        self,
        requirements: Requirements,
        profile: IndustryProfile,
        theme: GlobalTheme,
        jobs: Sequence[SectionJob],
        *,
        on_section: SectionCallback | None = None,
    ) -> list[SectionResult | BaseException]:
        """Run every job under the concurrency limit.

        Results come back in job order; callbacks fire in completion order.
        """
        semaphore = asyncio.Semaphore(self._max_concurrency)
        total = len(jobs)
        completed = 0

        async def _run(job: SectionJob) -> SectionResult:
            nonlocal completed
            async with semaphore:
                result = await self.generate_section(requirements, profile, theme, job)
            completed += 1
            if on_section is not None:
                on_section(result, completed, total)
            return result

        return await asyncio.gather(*(_run(job) for job in jobs), return_exceptions=True)

    async def generate_section(
        self,
        requirements: Requirements,
        profile: IndustryProfile,
        theme: GlobalTheme,
        job: SectionJob,
    ) -> SectionResult:
        definition = self._definition(job.section.kind)
        request = self.build_text_request(requirements, profile, theme, job, definition)

        async def _call_text() -> dict[str, Any]:
            response = await self._capability.generate(request)
            return self.parse_copy(response.content, definition, requirements, profile)

        text_outcome = await run_with_backoff(
            _call_text,
            fallback=lambda: self.fallback_copy(requirements, profile, job.page, job.section),
            attempts=self._max_attempts,
            base_delay=self._base_delay,
            call_timeout=self._call_timeout,
            sleep=self._sleep,
            label=f"{job.ref}:text",
        )

        images: list[ImageDirective] = []
        image_fallback = False
        errors = list(text_outcome.errors)
        if definition.image_slot:
            image_outcome = await self._generate_image(requirements, profile, job, definition)
            images.append(image_outcome.value)
            image_fallback = image_outcome.used_fallback
            errors.extend(image_outcome.errors)

        copy = text_outcome.value
        used_fallback = text_outcome.used_fallback or image_fallback
        content = SectionContent(
            page=job.page.slug,
            kind=job.section.kind,
            variant=job.section.variant,
            heading=copy["heading"],
            subheading=copy.get("subheading", ""),
            body=copy["body"],
            bullets=tuple(copy.get("bullets", ())),
            cta_label=copy.get("cta_label"),
            images=tuple(images),
            source="fallback" if text_outcome.used_fallback else "generated",
            attempts=text_outcome.attempts,
        )
        return SectionResult(content=content, used_fallback=used_fallback, errors=tuple(errors))

    def build_text_request(
        self,
        requirements: Requirements,
        profile: IndustryProfile,
        theme: GlobalTheme,
        job: SectionJob,
        definition: SectionDefinition,
    ) -> GenerationRequest:
        services = [
            {"name": service.name, "description": service.description} for service in requirements.services
        ] or [{"name": name, "description": ""} for name in profile.default_services]
        prompt_lines = [
            f"Write the {definition.label} section for the {job.page.title} page of {requirements.business_name}.",
            f"Target length: about {definition.word_count} words.",
            f"Tone: {requirements.tone}. Industry guidance: {profile.tone}.",
            "Guidance: " + "; ".join(definition.copy_hints),
        ]
        if job.notes:
            prompt_lines.append("Revise to fix: " + "; ".join(job.notes))
        context = {
            "section_kind": job.section.kind,
            "section_variant": job.section.variant,
            "section_features": list(job.section.features),
            "page": job.page.slug,
            "page_title": job.page.title,
            "business": requirements.context_summary(),
            "services": services,
            "tagline": derive_tagline(requirements, profile),
            "power_words": list(profile.power_words),
            "cta_suggestions": list(profile.cta_texts),
            "word_count": definition.word_count,
            "heading_font": theme.typography.heading_font,
        }
        return GenerationRequest(kind="text", prompt="\n".join(prompt_lines), context=context)

    def parse_copy(
        self,
        content: str,
        definition: SectionDefinition,
        requirements: Requirements,
        profile: IndustryProfile,
    ) -> dict[str, Any]:
        text = strip_code_fence(content)
        if not text:
            raise TransientGenerationError("empty section copy", stage="generating")

        try:
            payload = json.loads(text)
        except json.JSONDecodeError:
            payload = None

        if isinstance(payload, dict):
            body = str(payload.get("body") or "").strip()
            heading = str(payload.get("heading") or "").strip()
            if not body and not heading:
                raise TransientGenerationError("section copy missing heading and body", stage="generating")
            bullets = payload.get("bullets") or []
            if not isinstance(bullets, list):
                bullets = [bullets]
            cta = payload.get("cta_label")
            return {
                "heading": heading or self._fill(definition.fallback_heading, requirements, profile),
                "subheading": str(payload.get("subheading") or "").strip(),
                "body": body or heading,
                "bullets": [str(item).strip() for item in bullets if str(item).strip()],
                "cta_label": str(cta).strip() if cta else self._default_cta(definition, profile),
            }

        return {
            "heading": self._fill(definition.fallback_heading, requirements, profile),
            "subheading": "",
            "body": text,
            "bullets": [],
            "cta_label": self._default_cta(definition, profile),
        }

    def fallback_copy(
        self,
        requirements: Requirements,
        profile: IndustryProfile,
        page: PagePlan,
        section: SectionSpec,
    ) -> dict[str, Any]:
        """Deterministic template copy built from the profile's tone guidance."""
        definition = self._definition(section.kind)
        bullets: list[str] = []
        if section.kind == "services":
            bullets = [service.name for service in requirements.services] or list(profile.default_services)
        heading = self._fill(definition.fallback_heading, requirements, profile)
        body = self._fill(definition.fallback_body, requirements, profile)
        return {
            "heading": heading or requirements.business_name,
            "subheading": self._fill(definition.fallback_subheading, requirements, profile),
            "body": body or f"{requirements.business_name} is ready to help.",
            "bullets": bullets,
            "cta_label": self._default_cta(definition, profile),
        }

    def fallback_image(
        self,
        requirements: Requirements,
        profile: IndustryProfile,
        definition: SectionDefinition,
    ) -> ImageDirective:
        slot = definition.image_slot or "primary"
        prompt = profile.image_prompt(slot)
        if profile.image_style:
            prompt = f"{prompt}. Style: {profile.image_style}"
        return ImageDirective(
            prompt=prompt,
            alt_text=f"{definition.label} image for {requirements.business_name}",
            slot=slot,
        )

    async def _generate_image(
        self,
        requirements: Requirements,
        profile: IndustryProfile,
        job: SectionJob,
        definition: SectionDefinition,
    ):
        slot = definition.image_slot or "primary"
        brief = self.fallback_image(requirements, profile, definition)
        request = GenerationRequest(
            kind="image",
            prompt=brief.prompt,
            context={
                "business": requirements.business_name,
                "section_kind": job.section.kind,
                "slot": slot,
                "style": profile.image_style,
            },
        )

        async def _call_image() -> ImageDirective:
            response = await self._capability.generate(request)
            prompt = response.content.strip()
            if not prompt:
                raise TransientGenerationError("empty image prompt", stage="generating")
            return ImageDirective(prompt=prompt, alt_text=brief.alt_text, slot=slot)

        return await run_with_backoff(
            _call_image,
            fallback=lambda: brief,
            attempts=self._max_attempts,
            base_delay=self._base_delay,
            call_timeout=self._call_timeout,
            sleep=self._sleep,
            label=f"{job.ref}:image",
        )

    def _definition(self, kind: str) -> SectionDefinition:
        definition = self._sections.get(kind)
        if definition is None:
            raise KeyError(f"No section definition for {kind!r}")
        return definition

    def _default_cta(self, definition: SectionDefinition, profile: IndustryProfile) -> str | None:
        if definition.kind not in CTA_KINDS:
            return None
        return profile.cta_texts[0] if profile.cta_texts else "Get in touch"

    def _fill(self, template: str, requirements: Requirements, profile: IndustryProfile) -> str:
        if not template:
            return ""
        services = [service.name for service in requirements.services] or list(profile.default_services)
        if len(services) > 1:
            services_phrase = ", ".join(services[:-1]).lower() + f" and {services[-1].lower()}"
        else:
            services_phrase = services[0].lower() if services else "dependable service"
        contact_bits = []
        if requirements.phone:
            contact_bits.append(f"call {requirements.phone}")
        if requirements.email:
            contact_bits.append(f"email {requirements.email}")
        tone = requirements.tone or profile.tone
        values = {
            "business": requirements.business_name,
            "tagline": derive_tagline(requirements, profile),
            "audience": requirements.target_audience,
            "services_phrase": services_phrase,
            "industry": profile.name.lower(),
            "location_phrase": f" in {requirements.location}" if requirements.location else "",
            "tone_sentence": f"Every interaction is {tone.lower().rstrip('.')}.",
            "tone_word": (profile.tone.split(",")[0].strip().lower() or "friendly"),
            "cta": profile.cta_texts[0] if profile.cta_texts else "Get in touch",
            "contact_phrase": f" You can also {' or '.join(contact_bits)}." if contact_bits else "",
        }
        return template.format(**values).strip()


__all__ = [
    "ContentGenerator",
    "SectionJob",
    "SectionResult",
    "SiteGeneration",
    "derive_tagline",
]
