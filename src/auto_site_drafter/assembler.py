from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from .errors import TotalGenerationFailure
from .models.bundle import NavLink, PageArtifact
from .models.content import SectionContent
from .models.structure import SitePlan
from .models.theme import GlobalTheme

logger = logging.getLogger(__name__)


@dataclass
class AssemblyResult:
    pages: list[PageArtifact]
    missing_pages: list[str] = field(default_factory=list)


def page_href(slug: str) -> str:
    return f"{slug}.html"


class MultiPageAssembler:
    """Combine generated sections with the shared theme into page artifacts."""

    def __init__(self, *, image_extension: str = "jpg") -> None:
        self._image_extension = image_extension

    def assemble(
        self,
        plan: SitePlan,
        sections_by_page: Mapping[str, Sequence[SectionContent]],
        theme: GlobalTheme,
    ) -> AssemblyResult:
        available = [page for page in plan.pages if sections_by_page.get(page.slug)]
        missing = [page.slug for page in plan.pages if not sections_by_page.get(page.slug)]
        if not available:
            raise TotalGenerationFailure(
                "No pages could be assembled",
                stage="assembling",
                hint="Every page failed content generation",
            )

        artifacts: list[PageArtifact] = []
        for page in available:
            navigation = tuple(
                NavLink(
                    slug=other.slug,
                    label=other.title,
                    href=page_href(other.slug),
                    active=other.slug == page.slug,
                )
                for other in available
            )
            by_kind = {content.kind: content for content in sections_by_page[page.slug]}
            ordered = [by_kind[spec.kind] for spec in page.sections if spec.kind in by_kind]
            sections = tuple(self._rebase_assets(content, theme) for content in ordered)
            artifacts.append(
                PageArtifact(
                    slug=page.slug,
                    title=page.title,
                    page_type=page.page_type,
                    sections=sections,
                    navigation=navigation,
                    theme=theme,
                )
            )

        if missing:
            logger.warning("Assembled bundle with missing pages", extra={"missing_pages": missing})
        logger.info("Assembled pages", extra={"pages": [artifact.slug for artifact in artifacts]})
        return AssemblyResult(pages=artifacts, missing_pages=missing)

    def asset_path(self, theme: GlobalTheme, page: str, kind: str, slot: str) -> str:
        return f"{theme.asset_base_path}/images/{page}-{kind}-{slot}.{self._image_extension}"

    def _rebase_assets(self, content: SectionContent, theme: GlobalTheme) -> SectionContent:
        if not content.images:
            return content
        images = tuple(
            image.model_copy(update={"asset_path": self.asset_path(theme, content.page, content.kind, image.slot)})
            for image in content.images
        )
        return content.model_copy(update={"images": images})


__all__ = ["MultiPageAssembler", "AssemblyResult", "page_href"]
