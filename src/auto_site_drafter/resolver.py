from __future__ import annotations

import logging
import re
from typing import Sequence

from .dictionaries import DEFAULT_PROFILE_ID, INDUSTRY_PROFILES
from .models.industry import IndustryProfile
from .models.requirements import Requirements

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"[a-z0-9]+")


def _tokens(text: str) -> set[str]:
    return set(_TOKEN_RE.findall(text.lower()))


class IndustryProfileResolver:
    """Pick the industry profile whose keywords best match the business."""

    def __init__(
        self,
        *,
        profiles: Sequence[IndustryProfile] = INDUSTRY_PROFILES,
        default_profile_id: str = DEFAULT_PROFILE_ID,
        min_score: float = 1.0,
        industry_weight: float = 2.0,
    ) -> None:
        self._profiles = tuple(profiles)
        self._by_id = {profile.id: profile for profile in self._profiles}
        if default_profile_id not in self._by_id:
            raise ValueError(f"Unknown default profile: {default_profile_id}")
        self._default_id = default_profile_id
        self._min_score = min_score
        self._industry_weight = industry_weight

    def resolve(self, requirements: Requirements) -> IndustryProfile:
        explicit = requirements.industry.strip().lower()
        if explicit in self._by_id:
            return self._by_id[explicit]

        secondary_text = " ".join(
            [requirements.business_name, requirements.description, *requirements.brand.style_keywords]
        )
        best: IndustryProfile | None = None
        best_score = 0.0
        # Strictly greater keeps the earliest registered profile on ties
        for profile in self._profiles:
            score = self._industry_weight * self.score(profile, explicit) + self.score(profile, secondary_text)
            if score > best_score:
                best, best_score = profile, score

        if best is None or best_score < self._min_score:
            logger.info(
                "No industry profile matched; using default",
                extra={"industry": requirements.industry, "best_score": best_score},
            )
            return self._by_id[self._default_id]

        logger.info(
            "Resolved industry profile",
            extra={"profile": best.id, "score": best_score, "industry": requirements.industry},
        )
        return best

    def score(self, profile: IndustryProfile, text: str) -> float:
        if not text.strip():
            return 0.0
        lowered = text.lower()
        text_tokens = _tokens(lowered)
        score = 0.0
        for keyword in profile.keywords:
            keyword_lower = keyword.lower()
            if re.search(rf"\b{re.escape(keyword_lower)}\b", lowered):
                score += len(keyword_lower.split())
                continue
            keyword_tokens = _tokens(keyword_lower)
            if len(keyword_tokens) > 1:
                score += 0.5 * len(keyword_tokens & text_tokens)
        return score


__all__ = ["IndustryProfileResolver"]
