from __future__ import annotations

from typing import Any, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .content import SectionContent
from .quality import QualityReport
from .theme import GlobalTheme


class NavLink(BaseModel):
    model_config = ConfigDict(frozen=True)

    slug: str
    label: str
    href: str
    active: bool = False


class SeoMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    keywords: Sequence[str] = Field(default_factory=tuple)
    h1: str = ""
    canonical: str = ""
    open_graph: Mapping[str, str] = Field(default_factory=dict)
    twitter: Mapping[str, str] = Field(default_factory=dict)
    structured_data: Mapping[str, Any] = Field(default_factory=dict)
    placeholder: bool = False


class PageArtifact(BaseModel):
    model_config = ConfigDict(frozen=True)

    slug: str
    title: str
    page_type: str = "generic"
    sections: Sequence[SectionContent]
    navigation: Sequence[NavLink] = Field(default_factory=tuple)
    seo: SeoMetadata | None = None
    theme: GlobalTheme

    @property
    def filename(self) -> str:
        return f"{self.slug}.html"

    def section(self, kind: str) -> SectionContent | None:
        for section in self.sections:
            if section.kind == kind:
                return section
        return None


class BundleMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    run_id: str
    business_name: str
    industry_profile: str
    timings: Mapping[str, float] = Field(default_factory=dict)
    stage_versions: Mapping[str, str] = Field(default_factory=dict)
    missing_pages: Sequence[str] = Field(default_factory=tuple)
    repair_rounds: int = 0
    quality: QualityReport


class WebsiteBundle(BaseModel):
    """Terminal output of a successful run."""

    model_config = ConfigDict(frozen=True)

    pages: Sequence[PageArtifact] = Field(min_length=1)
    theme: GlobalTheme
    metadata: BundleMetadata
    files: Mapping[str, str] = Field(default_factory=dict)

    def page(self, slug: str) -> PageArtifact:
        for page in self.pages:
            if page.slug == slug:
                return page
        raise KeyError(slug)

    def summary(self) -> dict[str, Any]:
        quality = self.metadata.quality
        return {
            "run_id": self.metadata.run_id,
            "business_name": self.metadata.business_name,
            "industry_profile": self.metadata.industry_profile,
            "pages": [
                {
                    "slug": page.slug,
                    "title": page.title,
                    "sections": [section.kind for section in page.sections],
                    "seo_title": page.seo.title if page.seo else None,
                }
                for page in self.pages
            ],
            "missing_pages": list(self.metadata.missing_pages),
            "theme": self.theme.model_dump(mode="json"),
            "quality": {
                "aggregate_score": quality.aggregate_score,
                "verdict": quality.verdict,
                "meets_thresholds": quality.meets_thresholds,
                "issues": len(quality.issues),
                "rounds": quality.rounds,
            },
            "files": sorted(self.files),
            "timings": dict(self.metadata.timings),
        }


__all__ = [
    "WebsiteBundle",
    "BundleMetadata",
    "PageArtifact",
    "NavLink",
    "SeoMetadata",
]
