import json

import pytest

from auto_site_drafter.content_generator import ContentGenerator, SectionJob, derive_tagline
from auto_site_drafter.dictionaries import DEFAULT_SECTIONS
from auto_site_drafter.errors import TransientGenerationError
from auto_site_drafter.normalizer import normalize_requirements
from auto_site_drafter.planner import SectionPlanner
from auto_site_drafter.quality import IssueLedger
from auto_site_drafter.resolver import IndustryProfileResolver
from auto_site_drafter.theming import StyleSynthesizer

from conftest import (
    FailingCapability,
    FakeCapability,
    FlakyCapability,
    RecordingSleep,
    SlowCapability,
    copy_for,
    fallback_section,
    no_sleep,
)


def _context(payload):
    requirements = normalize_requirements(payload)
    profile = IndustryProfileResolver().resolve(requirements)
    theme = StyleSynthesizer().synthesize(requirements, profile)
    plan = SectionPlanner().plan(requirements, profile)
    return requirements, profile, theme, plan


def _job(plan, slug, kind):
    page = plan.page(slug)
    section = next(section for section in page.sections if section.kind == kind)
    return SectionJob(page=page, section=section)


@pytest.mark.asyncio
async def test_section_succeeds_on_third_attempt_without_fallback(aurora_payload):
    requirements, profile, theme, plan = _context(aurora_payload)
    sleep = RecordingSleep()
    generator = ContentGenerator(FlakyCapability(failures=2), sleep=sleep)
    job = _job(plan, "index", "testimonials")

    result = await generator.generate_section(requirements, profile, theme, job)

    request = generator.build_text_request(requirements, profile, theme, job, DEFAULT_SECTIONS["testimonials"])
    expected = copy_for(request)
    assert result.content.heading == expected["heading"]
    assert result.content.body == expected["body"]
    assert result.content.source == "generated"
    assert result.content.attempts == 3
    assert not result.used_fallback
    assert sleep.delays == [0.5, 1.0]

    ledger = IssueLedger()
    assert ledger.record_fallback(result) is None
    assert ledger.issues() == []


@pytest.mark.asyncio
async def test_section_uses_deterministic_fallback_after_three_failures(aurora_payload):
    requirements, profile, theme, plan = _context(aurora_payload)
    capability = FailingCapability()
    generator = ContentGenerator(capability, sleep=no_sleep)
    job = _job(plan, "index", "hero")

    result = await generator.generate_section(requirements, profile, theme, job)

    assert result.used_fallback
    assert result.content == fallback_section(generator, requirements, profile, job.page, job.section)
    # Three text attempts plus three image attempts
    assert capability.calls == 6

    ledger = IssueLedger()
    ledger.record_fallback(result)
    issues = [issue for issue in ledger.issues() if issue.ref == "index/hero"]
    assert len(issues) == 1
    assert issues[0].severity.value == "warning"


@pytest.mark.asyncio
async def test_fallback_copy_is_never_empty(bistro_payload):
    requirements, profile, theme, plan = _context(bistro_payload)
    generator = ContentGenerator(FailingCapability(), sleep=no_sleep)

    generation = await generator.generate_site(requirements, profile, theme, plan)

    assert not generation.failed_pages
    assert len(generation.results) == sum(len(page.sections) for page in plan.pages)
    for result in generation.results:
        assert result.used_fallback
        assert result.content.heading.strip()
        assert result.content.body.strip()
        assert result.content.source == "fallback"


@pytest.mark.asyncio
async def test_concurrency_is_bounded(aurora_payload):
    requirements, profile, theme, plan = _context(aurora_payload)
    capability = SlowCapability(delay=0.01)
    generator = ContentGenerator(capability, max_concurrency=2, sleep=no_sleep)

    await generator.generate_site(requirements, profile, theme, plan)

    assert capability.peak == 2


@pytest.mark.asyncio
async def test_results_keep_plan_order_and_callbacks_count_up(bistro_payload):
    requirements, profile, theme, plan = _context(bistro_payload)
    generator = ContentGenerator(SlowCapability(delay=0.001), max_concurrency=3, sleep=no_sleep)
    seen = []

    generation = await generator.generate_site(
        requirements,
        profile,
        theme,
        plan,
        on_section=lambda result, completed, total: seen.append((result.ref, completed, total)),
    )

    total = sum(len(page.sections) for page in plan.pages)
    assert [completed for _, completed, _ in seen] == list(range(1, total + 1))
    assert {count for _, _, count in seen} == {total}
    for page in plan.pages:
        assert [result.content.kind for result in generation.pages[page.slug]] == page.section_kinds


@pytest.mark.asyncio
async def test_generated_images_get_refined_prompts(aurora_payload):
    requirements, profile, theme, plan = _context(aurora_payload)
    generator = ContentGenerator(FakeCapability(), sleep=no_sleep)

    result = await generator.generate_section(requirements, profile, theme, _job(plan, "index", "hero"))

    (image,) = result.content.images
    assert image.prompt == "Photograph for hero"
    assert image.slot == "hero"
    assert image.alt_text == "Hero image for Aurora Design Studio"


def test_parse_copy_handles_fenced_json_and_plain_text(aurora_payload):
    requirements, profile, _, _ = _context(aurora_payload)
    generator = ContentGenerator(FakeCapability())
    definition = DEFAULT_SECTIONS["hero"]

    fenced = "```json\n" + json.dumps({"heading": "Rooms that feel like you", "body": "We design homes."}) + "\n```"
    parsed = generator.parse_copy(fenced, definition, requirements, profile)
    assert parsed["heading"] == "Rooms that feel like you"
    assert parsed["cta_label"] == profile.cta_texts[0]

    plain = generator.parse_copy("Just a paragraph of copy.", definition, requirements, profile)
    assert plain["body"] == "Just a paragraph of copy."
    assert plain["heading"]

    with pytest.raises(TransientGenerationError):
        generator.parse_copy("   ", definition, requirements, profile)
    with pytest.raises(TransientGenerationError):
        generator.parse_copy(json.dumps({"bullets": ["x"]}), definition, requirements, profile)


def test_services_fallback_uses_default_services_when_none_given():
    requirements, profile, _, plan = _context({"businessName": "Harbor Bistro", "industry": "restaurant", "pages": ["Services"]})
    generator = ContentGenerator(FakeCapability())
    page = plan.pages[0]
    section = next(section for section in page.sections if section.kind == "services")

    copy = generator.fallback_copy(requirements, profile, page, section)

    assert copy["bullets"] == list(profile.default_services)


def test_tagline_is_derived_when_missing():
    requirements, profile, _, _ = _context({"businessName": "Harbor Bistro", "industry": "restaurant"})

    assert derive_tagline(requirements, profile) == "Savor restaurant & dining for local customers"
    with_tagline = requirements.model_copy(update={"tagline": "Tides and tables"})
    assert derive_tagline(with_tagline, profile) == "Tides and tables"
