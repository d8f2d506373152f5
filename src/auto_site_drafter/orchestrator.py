from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Mapping, Sequence, TypeVar

from .assembler import AssemblyResult, MultiPageAssembler
from .config import PipelineSettings
from .content_generator import ContentGenerator, SectionCallback, SectionJob, SectionResult
from .errors import (
    InvalidTransitionError,
    PipelineError,
    PipelineTimeoutError,
    RunCancelled,
)
from .generative import GenerativeCapability
from .logging_config import set_run_id
from .models.bundle import BundleMetadata, PageArtifact, WebsiteBundle
from .models.content import SectionContent
from .models.industry import IndustryProfile
from .models.progress import PipelineStage
from .models.quality import QualityReport
from .models.requirements import Requirements
from .models.structure import SitePlan
from .models.theme import GlobalTheme
from .normalizer import RequirementsNormalizer
from .planner import SectionPlanner
from .progress import ProgressEmitter
from .quality import IssueLedger, QualityGate
from .renderer import SiteRenderer
from .resolver import IndustryProfileResolver
from .retry import Sleep
from .seo import SEOEnricher
from .theming import StyleSynthesizer

logger = logging.getLogger(__name__)

T = TypeVar("T")

Stage = PipelineStage

TRANSITIONS: Mapping[Stage | None, frozenset[Stage]] = {
    None: frozenset({Stage.validating}),
    Stage.validating: frozenset({Stage.resolving}),
    Stage.resolving: frozenset({Stage.planning}),
    Stage.planning: frozenset({Stage.theming}),
    Stage.theming: frozenset({Stage.generating}),
    Stage.generating: frozenset({Stage.assembling}),
    Stage.assembling: frozenset({Stage.enriching}),
    Stage.enriching: frozenset({Stage.scoring}),
    Stage.scoring: frozenset({Stage.repairing, Stage.complete}),
    Stage.repairing: frozenset({Stage.scoring, Stage.complete}),
}

# Progress reported on entering each stage.
STAGE_PROGRESS: Mapping[Stage, float] = {
    Stage.validating: 2.0,
    Stage.resolving: 8.0,
    Stage.planning: 14.0,
    Stage.theming: 20.0,
    Stage.generating: 25.0,
    Stage.assembling: 78.0,
    Stage.enriching: 84.0,
    Stage.scoring: 88.0,
    Stage.repairing: 90.0,
}
GENERATING_SPAN = 50.0
REPAIR_SPAN = 6.0

STAGE_MESSAGES: Mapping[Stage, str] = {
    Stage.validating: "Validating requirements",
    Stage.resolving: "Matching industry profile",
    Stage.planning: "Planning page layouts",
    Stage.theming: "Synthesizing visual theme",
    Stage.generating: "Generating section content",
    Stage.assembling: "Assembling pages",
    Stage.enriching: "Adding SEO metadata",
    Stage.scoring: "Scoring quality",
    Stage.repairing: "Repairing weak sections",
}

STAGE_VERSIONS: Mapping[str, str] = {
    "normalizer": "1.0",
    "resolver": "1.0",
    "planner": "1.0",
    "synthesizer": "1.0",
    "content_generator": "1.0",
    "assembler": "1.0",
    "seo": "1.0",
    "quality_gate": "1.0",
    "renderer": "1.0",
}


def _allowed(current: Stage | None, target: Stage) -> bool:
    if target in (Stage.failed, Stage.cancelled):
        return current is None or not current.is_terminal
    return target in TRANSITIONS.get(current, frozenset())


@dataclass
class RunContext:
    run_id: str
    emitter: ProgressEmitter
    cancel_event: asyncio.Event
    state: Stage | None = None
    timings: dict[str, float] = field(default_factory=dict)
    ledger: IssueLedger = field(default_factory=IssueLedger)
    _entered_at: float = field(default_factory=time.perf_counter)

    def check_cancelled(self) -> None:
        if self.cancel_event.is_set():
            raise RunCancelled(self.state.value if self.state else Stage.validating.value)

    def close_timer(self) -> None:
        now = time.perf_counter()
        if self.state is not None and not self.state.is_terminal:
            key = self.state.value
            self.timings[key] = round(self.timings.get(key, 0.0) + now - self._entered_at, 4)
        self._entered_at = now


class PipelineOrchestrator:
    """State machine driving one website generation run end to end."""

    def __init__(
        self,
        capability: GenerativeCapability,
        *,
        settings: PipelineSettings | None = None,
        normalizer: RequirementsNormalizer | None = None,
        resolver: IndustryProfileResolver | None = None,
        planner: SectionPlanner | None = None,
        synthesizer: StyleSynthesizer | None = None,
        assembler: MultiPageAssembler | None = None,
        seo: SEOEnricher | None = None,
        gate: QualityGate | None = None,
        renderer: SiteRenderer | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.settings = settings or PipelineSettings()
        self.normalizer = normalizer or RequirementsNormalizer()
        self.resolver = resolver or IndustryProfileResolver()
        self.planner = planner or SectionPlanner()
        self.synthesizer = synthesizer or StyleSynthesizer(asset_base_path=self.settings.asset_base_path)
        self.assembler = assembler or MultiPageAssembler()
        self.seo = seo or SEOEnricher(base_url=self.settings.site_base_url)
        self.gate = gate or QualityGate(
            threshold=self.settings.quality_threshold,
            max_repair_rounds=self.settings.max_repair_rounds,
        )
        self.renderer = renderer or SiteRenderer()
        self.generator = ContentGenerator(
            capability,
            max_concurrency=self.settings.max_concurrency,
            max_attempts=self.settings.max_attempts,
            base_delay=self.settings.base_delay_seconds,
            call_timeout=self.settings.call_timeout_seconds,
            sleep=sleep,
        )

    async def run(
        self,
        payload: Mapping[str, Any] | Requirements,
        *,
        emitter: ProgressEmitter | None = None,
        cancel_event: asyncio.Event | None = None,
        run_id: str | None = None,
    ) -> WebsiteBundle | None:
        """Execute the pipeline.

        Returns the bundle on success and ``None`` when the run failed or was
        cancelled; the emitter always receives exactly one terminal event.
        """
        ctx = RunContext(
            run_id=run_id or f"run_{uuid.uuid4().hex[:12]}",
            emitter=emitter or ProgressEmitter(),
            cancel_event=cancel_event or asyncio.Event(),
        )
        set_run_id(ctx.run_id)
        logger.info("Pipeline run started", extra={"timeout_seconds": self.settings.run_timeout_seconds})

        try:
            return await asyncio.wait_for(self._execute(payload, ctx), timeout=self.settings.run_timeout_seconds)
        except asyncio.TimeoutError:
            stage = ctx.state.value if ctx.state else Stage.validating.value
            error = PipelineTimeoutError(
                f"Run exceeded {self.settings.run_timeout_seconds}s",
                stage=stage,
                hint="Retry with fewer pages or a longer run timeout",
            )
            logger.error("Pipeline run timed out", extra={"stage": stage})
            self._fail(ctx, error)
        except RunCancelled as exc:
            logger.info("Pipeline run cancelled", extra={"stage": exc.stage})
            self._transition(ctx, Stage.cancelled, cancelled_stage=exc.stage)
        except PipelineError as exc:
            logger.error(
                "Pipeline run failed",
                extra={"code": exc.code.value, "stage": exc.stage, "error_id": exc.error_id},
            )
            self._fail(ctx, exc)
        except Exception as exc:
            logger.error("Unexpected pipeline failure", exc_info=True)
            error = PipelineError(f"Unexpected error: {exc}", stage=ctx.state.value if ctx.state else None)
            self._fail(ctx, error)
        finally:
            set_run_id(None)
        return None

    async def _execute(self, payload: Mapping[str, Any] | Requirements, ctx: RunContext) -> WebsiteBundle:
        self._transition(ctx, Stage.validating)
        requirements = self.normalizer.normalize(payload)
        ctx.check_cancelled()

        self._transition(ctx, Stage.resolving)
        profile = self.resolver.resolve(requirements)
        ctx.check_cancelled()

        self._transition(ctx, Stage.planning)
        plan = self.planner.plan(requirements, profile)
        ctx.check_cancelled()

        self._transition(ctx, Stage.theming)
        theme = self.synthesizer.synthesize(requirements, profile)
        ctx.check_cancelled()

        self._transition(ctx, Stage.generating)
        contents = await self._generate(ctx, requirements, profile, theme, plan)
        ctx.check_cancelled()

        self._transition(ctx, Stage.assembling)
        assembly = self.assembler.assemble(plan, self._by_page(plan, contents), theme)
        ctx.check_cancelled()

        self._transition(ctx, Stage.enriching)
        pages = self.seo.enrich(assembly.pages, requirements, profile)
        ctx.check_cancelled()

        self._transition(ctx, Stage.scoring)
        report = self._score(ctx, pages, theme, requirements, profile, assembly, rounds=0)

        rounds = 0
        while not report.meets_thresholds and rounds < self.gate.max_repair_rounds:
            targets = self.gate.repair_targets(report, pages)
            if not targets:
                logger.info("No repairable sections implicated", extra={"failing": [c.value for c in report.failing_categories]})
                break
            ctx.check_cancelled()
            rounds += 1
            self._transition(
                ctx,
                Stage.repairing,
                progress=STAGE_PROGRESS[Stage.repairing] + REPAIR_SPAN * (rounds - 1) / max(1, self.gate.max_repair_rounds),
                message=f"Repair round {rounds}: regenerating {len(targets)} section(s)",
            )
            await self._repair(ctx, requirements, profile, theme, plan, contents, targets, round_number=rounds)
            ctx.check_cancelled()

            assembly = self.assembler.assemble(plan, self._by_page(plan, contents), theme)
            pages = self.seo.enrich(assembly.pages, requirements, profile)
            self._transition(ctx, Stage.scoring, progress=STAGE_PROGRESS[Stage.repairing] + REPAIR_SPAN * rounds / max(1, self.gate.max_repair_rounds))
            report = self._score(ctx, pages, theme, requirements, profile, assembly, rounds=rounds)

        ctx.check_cancelled()
        files = self._render_files(pages, theme, requirements)
        bundle = WebsiteBundle(
            pages=pages,
            theme=theme,
            metadata=BundleMetadata(
                run_id=ctx.run_id,
                business_name=requirements.business_name,
                industry_profile=profile.id,
                timings=self._final_timings(ctx),
                stage_versions=dict(STAGE_VERSIONS),
                missing_pages=tuple(assembly.missing_pages),
                repair_rounds=rounds,
                quality=report,
            ),
            files=files,
        )
        self._transition(ctx, Stage.complete, data=bundle.summary())
        logger.info(
            "Pipeline run complete",
            extra={
                "pages": len(bundle.pages),
                "aggregate_score": report.aggregate_score,
                "meets_thresholds": report.meets_thresholds,
                "repair_rounds": rounds,
            },
        )
        return bundle

    async def _generate(
        self,
        ctx: RunContext,
        requirements: Requirements,
        profile: IndustryProfile,
        theme: GlobalTheme,
        plan: SitePlan,
    ) -> dict[str, dict[str, SectionContent]]:
        on_section = self._section_progress(ctx, Stage.generating, STAGE_PROGRESS[Stage.generating], GENERATING_SPAN)
        generation = await self._until_cancelled(
            ctx,
            self.generator.generate_site(requirements, profile, theme, plan, on_section=on_section),
        )

        contents: dict[str, dict[str, SectionContent]] = {}
        for slug, results in generation.pages.items():
            contents[slug] = {}
            for result in results:
                ctx.ledger.record_fallback(result)
                contents[slug][result.content.kind] = result.content
        for slug, reason in generation.failed_pages.items():
            logger.warning("Page dropped after generation error", extra={"page": slug, "reason": reason})
        return contents

    async def _repair(
        self,
        ctx: RunContext,
        requirements: Requirements,
        profile: IndustryProfile,
        theme: GlobalTheme,
        plan: SitePlan,
        contents: dict[str, dict[str, SectionContent]],
        targets: Mapping[str, Sequence[str]],
        *,
        round_number: int,
    ) -> None:
        jobs: list[SectionJob] = []
        for ref, notes in targets.items():
            slug, _, kind = ref.partition("/")
            if slug not in contents:
                continue
            page = plan.page(slug)
            spec = next((section for section in page.sections if section.kind == kind), None)
            if spec is not None:
                jobs.append(SectionJob(page=page, section=spec, notes=tuple(notes)))

        span = REPAIR_SPAN / max(1, self.gate.max_repair_rounds)
        on_section = self._section_progress(ctx, Stage.repairing, STAGE_PROGRESS[Stage.repairing] + span * (round_number - 1), span)
        outcomes = await self._until_cancelled(
            ctx,
            self.generator.generate_jobs(requirements, profile, theme, jobs, on_section=on_section),
        )
        for job, outcome in zip(jobs, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning("Repair failed for section", exc_info=outcome, extra={"ref": job.ref})
                continue
            if outcome.used_fallback:
                # Keep earlier generated copy rather than downgrading it to a template.
                previous = contents[job.page.slug].get(job.section.kind)
                if previous is not None and previous.source == "generated" and outcome.content.source == "fallback":
                    continue
                ctx.ledger.record_fallback(outcome)
            else:
                ctx.ledger.resolve(job.ref)
            contents[job.page.slug][job.section.kind] = outcome.content

    def _section_progress(
        self,
        ctx: RunContext,
        stage: Stage,
        start: float,
        span: float,
    ) -> SectionCallback:
        """Callback emitting one labeled sub-event per finished section of ``stage``."""

        def _on_section(result: SectionResult, completed: int, total: int) -> None:
            if ctx.cancel_event.is_set():
                return
            label = "fallback" if result.used_fallback else "generated"
            ctx.emitter.emit(
                stage.value,
                start + span * completed / max(1, total),
                f"Section {completed}/{total} {label}",
                page=result.content.page,
                section=result.content.kind,
            )

        return _on_section

    async def _until_cancelled(self, ctx: RunContext, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the run is cancelled first."""
        work = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(ctx.cancel_event.wait())
        try:
            done, _ = await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
            if work in done:
                return work.result()
            raise RunCancelled(ctx.state.value if ctx.state else Stage.generating.value)
        finally:
            for task in (work, waiter):
                if not task.done():
                    task.cancel()
            await asyncio.gather(work, waiter, return_exceptions=True)

    def _score(
        self,
        ctx: RunContext,
        pages: Sequence[PageArtifact],
        theme: GlobalTheme,
        requirements: Requirements,
        profile: IndustryProfile,
        assembly: AssemblyResult,
        *,
        rounds: int,
    ) -> QualityReport:
        return self.gate.evaluate(
            pages,
            theme,
            requirements,
            profile,
            recorded_issues=ctx.ledger.issues(),
            missing_pages=assembly.missing_pages,
            rounds=rounds,
        )

    def _render_files(
        self,
        pages: Sequence[PageArtifact],
        theme: GlobalTheme,
        requirements: Requirements,
    ) -> dict[str, str]:
        files: dict[str, str] = {}
        if self.settings.render_html:
            files.update(self.renderer.render(pages, theme, requirements))
        files["sitemap.xml"] = self.seo.sitemap(pages)
        files["robots.txt"] = self.seo.robots()
        return files

    def _by_page(
        self,
        plan: SitePlan,
        contents: Mapping[str, Mapping[str, SectionContent]],
    ) -> dict[str, list[SectionContent]]:
        return {page.slug: list(contents.get(page.slug, {}).values()) for page in plan.pages}

    def _final_timings(self, ctx: RunContext) -> dict[str, float]:
        ctx.close_timer()
        timings = dict(ctx.timings)
        timings["total"] = round(sum(timings.values()), 4)
        return timings

    def _fail(self, ctx: RunContext, error: PipelineError) -> None:
        self._transition(ctx, Stage.failed, error=error)

    def _transition(
        self,
        ctx: RunContext,
        target: Stage,
        *,
        progress: float | None = None,
        message: str | None = None,
        data: Mapping[str, Any] | None = None,
        error: PipelineError | None = None,
        cancelled_stage: str | None = None,
    ) -> None:
        """Move the run to ``target`` and publish that transition's event."""
        if not _allowed(ctx.state, target):
            raise InvalidTransitionError(
                f"Illegal transition {ctx.state.value if ctx.state else 'start'} -> {target.value}",
                stage=ctx.state.value if ctx.state else None,
            )
        previous = ctx.state
        ctx.close_timer()
        ctx.state = target
        logger.info(
            "Stage transition",
            extra={"from_stage": previous.value if previous else None, "to_stage": target.value},
        )

        if target is Stage.complete:
            ctx.emitter.complete(data or {})
        elif target is Stage.failed and error is not None:
            ctx.emitter.fail(
                error.message,
                error.stage or (previous.value if previous else Stage.validating.value),
                code=error.code.value,
            )
        elif target is Stage.cancelled:
            ctx.emitter.cancel(cancelled_stage or (previous.value if previous else Stage.validating.value))
        else:
            ctx.emitter.emit(
                target.value,
                STAGE_PROGRESS[target] if progress is None else progress,
                message or STAGE_MESSAGES[target],
            )


__all__ = ["PipelineOrchestrator", "RunContext", "TRANSITIONS", "STAGE_PROGRESS"]
