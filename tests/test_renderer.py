import re

import pytest

from auto_site_drafter.models.bundle import NavLink, PageArtifact
from auto_site_drafter.models.content import ImageDirective, SectionContent
from auto_site_drafter.normalizer import normalize_requirements
from auto_site_drafter.orchestrator import PipelineOrchestrator
from auto_site_drafter.renderer import THEME_CSS_PATH, SiteRenderer
from auto_site_drafter.resolver import IndustryProfileResolver
from auto_site_drafter.seo import SEOEnricher
from auto_site_drafter.theming import StyleSynthesizer

from conftest import FakeCapability, no_sleep

CTA_HREF = re.compile(r'<a class="button[^"]*" href="([^"]+)"')


def _site(business_name="Harbor Bistro"):
    requirements = normalize_requirements(
        {"businessName": business_name, "industry": "restaurant", "phone": "+1 206 555 0100", "pages": ["Home", "About"]}
    )
    profile = IndustryProfileResolver().resolve(requirements)
    theme = StyleSynthesizer().synthesize(requirements, profile)
    navigation = (
        NavLink(slug="index", label="Home", href="index.html"),
        NavLink(slug="about", label="About", href="about.html"),
    )
    pages = [
        PageArtifact(
            slug="index",
            title="Home",
            page_type="home",
            sections=(
                SectionContent(
                    page="index",
                    kind="hero",
                    heading="Seafood worth the trip",
                    body="Fresh daily.\n\nOpen late on weekends.",
                    cta_label="Reserve a table",
                    images=(
                        ImageDirective(
                            prompt="Candlelit dining room",
                            alt_text="Hero image",
                            slot="hero",
                            asset_path="/assets/images/index-hero-hero.jpg",
                        ),
                    ),
                ),
                SectionContent(page="index", kind="contact", heading="Visit us", body="Pier 57."),
            ),
            navigation=tuple(link.model_copy(update={"active": link.slug == "index"}) for link in navigation),
            theme=theme,
        ),
        PageArtifact(
            slug="about",
            title="About",
            page_type="about",
            sections=(SectionContent(page="about", kind="hero", heading="Our story", body="Since 2009."),),
            navigation=tuple(link.model_copy(update={"active": link.slug == "about"}) for link in navigation),
            theme=theme,
        ),
    ]
    pages = SEOEnricher().enrich(pages, requirements, profile)
    return pages, theme, requirements


def test_renders_one_file_per_page_and_shared_stylesheet():
    pages, theme, requirements = _site()

    files = SiteRenderer().render(pages, theme, requirements)

    assert set(files) == {"index.html", "about.html", THEME_CSS_PATH}
    index = files["index.html"]
    assert "<title>Seafood worth the trip | Harbor Bistro</title>" in index
    assert 'href="/assets/css/theme.css"' in index
    assert 'aria-current="page">Home</a>' in index
    assert "<p>Open late on weekends.</p>" in index
    assert 'src="/assets/images/index-hero-hero.jpg"' in index
    assert "application/ld+json" in index
    assert "tel:+1 206 555 0100" in index


def test_stylesheet_contains_theme_variables():
    pages, theme, requirements = _site()

    css = SiteRenderer().render(pages, theme, requirements)[THEME_CSS_PATH]

    assert f"--color-primary: {theme.colors.primary};" in css
    assert f"--font-heading: {theme.typography.heading_font};" in css


def test_html_is_escaped():
    pages, theme, requirements = _site(business_name="Tom & <Jerry>")

    index = SiteRenderer().render(pages, theme, requirements)["index.html"]

    assert "Tom &amp; &lt;Jerry&gt;" in index
    assert "<Jerry>" not in index


def _assert_cta_links_resolve(files):
    pages = {path: html for path, html in files.items() if path.endswith(".html")}
    checked = 0
    for path, html in pages.items():
        for href in CTA_HREF.findall(html):
            checked += 1
            if href.startswith("#"):
                assert f'id="{href[1:]}"' in html, (path, href)
            else:
                assert href in files, (path, href)
    assert checked


@pytest.mark.asyncio
async def test_single_page_site_links_calls_to_action_in_page(aurora_payload):
    bundle = await PipelineOrchestrator(FakeCapability(), sleep=no_sleep).run(aurora_payload)

    _assert_cta_links_resolve(bundle.files)
    assert set(CTA_HREF.findall(bundle.files["index.html"])) == {"#contact"}


@pytest.mark.asyncio
async def test_calls_to_action_point_at_the_contact_page(aurora_payload):
    payload = {**aurora_payload, "pages": ["Home", "Contact Us"]}

    bundle = await PipelineOrchestrator(FakeCapability(), sleep=no_sleep).run(payload)

    _assert_cta_links_resolve(bundle.files)
    assert set(CTA_HREF.findall(bundle.files["index.html"])) == {"contact-us.html"}
    assert set(CTA_HREF.findall(bundle.files["contact-us.html"])) == {"#contact"}


def test_cta_falls_back_to_closing_section_without_contact():
    pages, theme, requirements = _site()
    about = pages[1]
    closing = about.model_copy(
        update={"sections": (*about.sections, SectionContent(page="about", kind="cta", heading="Book now", body="Tables go fast."))}
    )

    renderer = SiteRenderer()

    assert renderer.cta_href(closing, None) == "#cta"
    assert renderer.cta_href(pages[0], None) == "#contact"
    assert renderer.cta_href(pages[0], closing.model_copy(update={"page_type": "contact"})) == "about.html"
