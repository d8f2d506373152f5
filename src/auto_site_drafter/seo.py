from __future__ import annotations

import logging
from typing import Any, Sequence
from xml.sax.saxutils import escape

from .models.bundle import PageArtifact, SeoMetadata
from .models.industry import IndustryProfile
from .models.requirements import Requirements

logger = logging.getLogger(__name__)

TITLE_LIMIT = 60
DESCRIPTION_LIMIT = 155

SCHEMA_TYPES = {
    "services": "Service",
    "about": "AboutPage",
    "contact": "ContactPage",
    "faq": "FAQPage",
    "blog": "Blog",
}


def truncate(text: str, limit: int) -> str:
    """Trim ``text`` to ``limit`` characters at a word boundary."""
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    cut = text[: limit - 1].rsplit(" ", 1)[0].rstrip(",;:.")
    return f"{cut}…"


class SEOEnricher:
    """Derive per-page metadata from assembled content. Deterministic."""

    def __init__(self, *, base_url: str = "https://example.com") -> None:
        self._base_url = base_url.rstrip("/")

    def enrich(
        self,
        pages: Sequence[PageArtifact],
        requirements: Requirements,
        profile: IndustryProfile,
    ) -> list[PageArtifact]:
        return [
            page.model_copy(update={"seo": self.page_metadata(page, index, requirements, profile)})
            for index, page in enumerate(pages)
        ]

    def page_metadata(
        self,
        page: PageArtifact,
        index: int,
        requirements: Requirements,
        profile: IndustryProfile,
    ) -> SeoMetadata:
        business = requirements.business_name
        hero = page.section("hero")
        about = page.section("about")
        placeholder = False

        if index == 0 and hero and hero.heading.strip() and hero.heading.strip() != business:
            title = f"{hero.heading.strip()} | {business}"
        elif index == 0:
            title = f"{business} | {profile.name}"
        else:
            title = f"{page.title} | {business}"
        if len(title) > TITLE_LIMIT:
            title = truncate(title.split(" | ")[0], TITLE_LIMIT - len(business) - 3) + f" | {business}"
            if len(title) > TITLE_LIMIT:
                title = truncate(title, TITLE_LIMIT)

        source = next(
            (section.body for section in (about, hero) if section is not None and section.body.strip()),
            "",
        )
        if not source:
            placeholder = True
            source = f"{business}: {requirements.description or profile.name}."
            logger.warning("SEO description placeholder used", extra={"page": page.slug})
        description = truncate(source, DESCRIPTION_LIMIT)

        h1 = hero.heading.strip() if hero and hero.heading.strip() else business
        canonical = f"{self._base_url}/" if page.slug == "index" else f"{self._base_url}/{page.filename}"
        image = next(
            (image.asset_path for section in page.sections for image in section.images if image.asset_path),
            None,
        )
        open_graph = {
            "og:title": title,
            "og:description": description,
            "og:type": "website",
            "og:url": canonical,
            "og:site_name": business,
        }
        twitter = {"twitter:card": "summary", "twitter:title": title, "twitter:description": description}
        if image:
            open_graph["og:image"] = f"{self._base_url}{image}"
            twitter["twitter:card"] = "summary_large_image"
            twitter["twitter:image"] = f"{self._base_url}{image}"

        return SeoMetadata(
            title=title,
            description=description,
            keywords=self._keywords(requirements, profile),
            h1=h1,
            canonical=canonical,
            open_graph=open_graph,
            twitter=twitter,
            structured_data=self._structured_data(page, index, requirements, description, canonical),
            placeholder=placeholder,
        )

    def sitemap(self, pages: Sequence[PageArtifact]) -> str:
        lines = ['<?xml version="1.0" encoding="UTF-8"?>', '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">']
        for index, page in enumerate(pages):
            loc = page.seo.canonical if page.seo else f"{self._base_url}/{page.filename}"
            priority = "1.0" if index == 0 else "0.8"
            lines.append(f"  <url><loc>{escape(loc)}</loc><priority>{priority}</priority></url>")
        lines.append("</urlset>")
        return "\n".join(lines) + "\n"

    def robots(self) -> str:
        return f"User-agent: *\nAllow: /\nSitemap: {self._base_url}/sitemap.xml\n"

    def _keywords(self, requirements: Requirements, profile: IndustryProfile) -> tuple[str, ...]:
        candidates = [
            *(service.name.lower() for service in requirements.services),
            *(keyword for keyword in profile.keywords[:4]),
        ]
        if requirements.location:
            candidates.append(requirements.location.split(",")[0].strip().lower())
        return tuple(dict.fromkeys(candidate for candidate in candidates if candidate))[:10]

    def _structured_data(
        self,
        page: PageArtifact,
        index: int,
        requirements: Requirements,
        description: str,
        canonical: str,
    ) -> dict[str, Any]:
        business = requirements.business_name
        if index == 0:
            data: dict[str, Any] = {
                "@context": "https://schema.org",
                "@type": "LocalBusiness" if requirements.location else "Organization",
                "name": business,
                "description": description,
                "url": canonical,
            }
            if requirements.location:
                data["address"] = requirements.location
            if requirements.phone:
                data["telephone"] = requirements.phone
            if requirements.email:
                data["email"] = str(requirements.email)
            return data

        schema_type = SCHEMA_TYPES.get(page.page_type, "WebPage")
        data = {
            "@context": "https://schema.org",
            "@type": schema_type,
            "name": f"{page.title} - {business}",
            "description": description,
            "url": canonical,
        }
        if schema_type == "Service":
            data["provider"] = {"@type": "Organization", "name": business}
        return data


__all__ = ["SEOEnricher", "truncate"]
