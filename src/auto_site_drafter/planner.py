from __future__ import annotations

import logging
import re
from typing import Mapping, Sequence

from .dictionaries import (
    CLOSING_SECTIONS,
    DEFAULT_PAGE_RECIPES,
    DEFAULT_SECTIONS,
    FEATURE_SECTIONS,
    PAGE_TYPE_KEYWORDS,
    SECTION_HOME_PAGE,
    FeatureRule,
    SectionDefinition,
)
from .models.industry import IndustryProfile
from .models.requirements import Requirements
from .models.structure import PagePlan, SectionSpec, SitePlan

logger = logging.getLogger(__name__)


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "page"


class SectionPlanner:
    """Turn the requested page list into ordered section plans."""

    def __init__(
        self,
        *,
        recipes: Mapping[str, Sequence[str]] = DEFAULT_PAGE_RECIPES,
        sections: Mapping[str, SectionDefinition] = DEFAULT_SECTIONS,
        page_keywords: Mapping[str, Sequence[str]] = PAGE_TYPE_KEYWORDS,
        feature_rules: Mapping[str, FeatureRule] = FEATURE_SECTIONS,
        closing_kind: str = "contact",
    ) -> None:
        self._recipes = recipes
        self._sections = sections
        self._page_keywords = page_keywords
        self._feature_rules = feature_rules
        self._closing_kind = closing_kind

    def plan(self, requirements: Requirements, profile: IndustryProfile) -> SitePlan:
        page_types = [self.classify_page(name, index) for index, name in enumerate(requirements.pages)]
        slugs = self._assign_slugs(requirements.pages)
        additions, removals = self._feature_changes(requirements.features)

        pages: list[PagePlan] = []
        for index, (name, page_type, slug) in enumerate(zip(requirements.pages, page_types, slugs)):
            kinds = list(profile.recipe_for(page_type) or self._recipes.get(page_type) or self._recipes["generic"])
            kinds, triggered = self._apply_features(kinds, index, page_type, page_types, additions, removals)
            if not requirements.services and page_type != "services":
                kinds = [kind for kind in kinds if kind != "services"]
            kinds = self._guarantee_frame(self._dedupe(kinds))
            pages.append(
                PagePlan(
                    slug=slug,
                    title=name,
                    page_type=page_type,
                    order=index,
                    sections=tuple(
                        SectionSpec(kind=kind, variant=self._variant(kind, profile), features=tuple(triggered.get(kind, ())))
                        for kind in kinds
                    ),
                )
            )
            logger.debug("Planned page", extra={"page": slug, "sections": kinds})

        return SitePlan(pages=tuple(pages))

    def classify_page(self, name: str, index: int = 0) -> str:
        lowered = name.lower()
        for page_type, keywords in self._page_keywords.items():
            if any(keyword in lowered for keyword in keywords):
                return page_type
        return "home" if index == 0 else "generic"

    def _assign_slugs(self, names: Sequence[str]) -> list[str]:
        slugs: list[str] = []
        used: set[str] = set()
        for index, name in enumerate(names):
            slug = "index" if index == 0 else slugify(name)
            candidate, counter = slug, 2
            while candidate in used:
                candidate = f"{slug}-{counter}"
                counter += 1
            used.add(candidate)
            slugs.append(candidate)
        return slugs

    def _feature_changes(self, features: Sequence[str]) -> tuple[list[tuple[str, FeatureRule]], set[str]]:
        additions: list[tuple[str, FeatureRule]] = []
        removals: set[str] = set()
        for feature in features:
            negated = feature.startswith("no ")
            key = feature[3:].strip() if negated else feature
            rule = self._feature_rules.get(key)
            if rule is None:
                logger.debug("Ignoring unknown feature request", extra={"feature": feature})
                continue
            if negated:
                removals.add(rule.section)
            else:
                additions.append((key, rule))
        return additions, removals

    def _apply_features(
        self,
        kinds: list[str],
        index: int,
        page_type: str,
        page_types: Sequence[str],
        additions: Sequence[tuple[str, FeatureRule]],
        removals: set[str],
    ) -> tuple[list[str], dict[str, list[str]]]:
        result = list(kinds)
        triggered: dict[str, list[str]] = {}
        for feature, rule in additions:
            if rule.scope == "all" or self._is_primary_page(rule.section, index, page_type, page_types):
                triggered.setdefault(rule.section, []).append(feature)
                # Feature sections go before the closing call to action
                insert_at = len(result)
                while insert_at > 0 and result[insert_at - 1] in CLOSING_SECTIONS:
                    insert_at -= 1
                if rule.section in CLOSING_SECTIONS:
                    insert_at = len(result)
                result.insert(insert_at, rule.section)
        return [kind for kind in result if kind not in removals or kind == "hero"], triggered

    def _is_primary_page(self, section: str, index: int, page_type: str, page_types: Sequence[str]) -> bool:
        home_type = SECTION_HOME_PAGE.get(section)
        if home_type and home_type in page_types:
            return page_type == home_type and page_types.index(home_type) == index
        return index == 0

    def _dedupe(self, kinds: Sequence[str]) -> list[str]:
        return [kind for kind in dict.fromkeys(kinds) if kind in self._sections]

    def _guarantee_frame(self, kinds: list[str]) -> list[str]:
        body = [kind for kind in kinds if kind != "hero"]
        closing = [kind for kind in body if kind in CLOSING_SECTIONS]
        if closing:
            last = closing[-1]
            body = [kind for kind in body if kind != last] + [last]
        else:
            body.append(self._closing_kind)
        return ["hero", *body]

    def _variant(self, kind: str, profile: IndustryProfile) -> str:
        if kind == "hero":
            return profile.hero_style
        return "default"


__all__ = ["SectionPlanner", "slugify"]
