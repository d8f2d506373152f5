from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field


class SectionSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    variant: str = "default"
    features: Sequence[str] = Field(default_factory=tuple)


class PagePlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    slug: str
    title: str
    page_type: str = Field(default="generic")
    order: int = 0
    sections: Sequence[SectionSpec] = Field(default_factory=tuple)

    @property
    def section_kinds(self) -> list[str]:
        return [section.kind for section in self.sections]


class SitePlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    pages: Sequence[PagePlan]

    def page(self, slug: str) -> PagePlan:
        for page in self.pages:
            if page.slug == slug:
                return page
        raise KeyError(slug)


__all__ = ["SectionSpec", "PagePlan", "SitePlan"]
