import pytest

from auto_site_drafter.assembler import MultiPageAssembler, page_href
from auto_site_drafter.content_generator import ContentGenerator
from auto_site_drafter.errors import TotalGenerationFailure
from auto_site_drafter.normalizer import normalize_requirements
from auto_site_drafter.planner import SectionPlanner
from auto_site_drafter.resolver import IndustryProfileResolver
from auto_site_drafter.theming import StyleSynthesizer

from conftest import FakeCapability, fallback_section


@pytest.fixture
def site(bistro_payload):
    requirements = normalize_requirements(bistro_payload)
    profile = IndustryProfileResolver().resolve(requirements)
    theme = StyleSynthesizer().synthesize(requirements, profile)
    plan = SectionPlanner().plan(requirements, profile)
    generator = ContentGenerator(FakeCapability())
    contents = {
        page.slug: [fallback_section(generator, requirements, profile, page, section) for section in page.sections]
        for page in plan.pages
    }
    return plan, theme, contents


def test_pages_share_theme_and_navigation(site):
    plan, theme, contents = site

    result = MultiPageAssembler().assemble(plan, contents, theme)

    assert [page.slug for page in result.pages] == ["index", "menu", "about", "contact"]
    assert result.missing_pages == []
    for page in result.pages:
        assert page.theme is theme
        assert [link.href for link in page.navigation] == ["index.html", "menu.html", "about.html", "contact.html"]
        assert [link.slug for link in page.navigation if link.active] == [page.slug]


def test_sections_follow_plan_order(site):
    plan, theme, contents = site
    shuffled = {slug: list(reversed(sections)) for slug, sections in contents.items()}

    result = MultiPageAssembler().assemble(plan, shuffled, theme)

    for planned, page in zip(plan.pages, result.pages):
        assert [section.kind for section in page.sections] == planned.section_kinds


def test_asset_paths_share_one_base(site):
    plan, theme, contents = site

    result = MultiPageAssembler().assemble(plan, contents, theme)

    hero = result.pages[0].section("hero")
    assert hero.images[0].asset_path == "/assets/images/index-hero-hero.jpg"
    paths = [image.asset_path for page in result.pages for section in page.sections for image in section.images]
    assert paths and all(path.startswith(f"{theme.asset_base_path}/images/") for path in paths)


def test_missing_pages_are_recorded(site):
    plan, theme, contents = site
    contents["menu"] = []

    result = MultiPageAssembler().assemble(plan, contents, theme)

    assert result.missing_pages == ["menu"]
    assert "menu.html" not in [link.href for link in result.pages[0].navigation]


def test_zero_pages_is_fatal(site):
    plan, theme, _ = site

    with pytest.raises(TotalGenerationFailure) as excinfo:
        MultiPageAssembler().assemble(plan, {}, theme)

    assert excinfo.value.stage == "assembling"


def test_page_href():
    assert page_href("about") == "about.html"
