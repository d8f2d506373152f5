from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Iterable, Mapping, Sequence

from .content_generator import SectionResult
from .dictionaries import DEFAULT_PROFILE_ID, DEFAULT_SECTIONS, SectionDefinition
from .models.bundle import PageArtifact
from .models.industry import IndustryProfile
from .models.quality import CategoryScore, QualityCategory, QualityIssue, QualityReport, Severity
from .models.requirements import Requirements
from .models.theme import GlobalTheme
from .theming import contrast_ratio

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 7.5
DEFAULT_MAX_REPAIR_ROUNDS = 2

DEFAULT_WEIGHTS: Mapping[QualityCategory, float] = {
    QualityCategory.visual_design: 0.2,
    QualityCategory.structure: 0.2,
    QualityCategory.content: 0.2,
    QualityCategory.trust_conversion: 0.15,
    QualityCategory.seo: 0.15,
    QualityCategory.distinctiveness: 0.1,
}

VERDICTS = (
    (9.5, "World-Class"),
    (8.5, "Excellent"),
    (7.5, "Good"),
    (6.0, "OK"),
)

CLOSING_KINDS = frozenset({"cta", "contact"})
SOCIAL_PROOF_KINDS = frozenset({"testimonials", "stats", "team", "portfolio", "gallery"})

# Issue codes that point at a regenerable section.
CONTENT_REPAIR_CODES = frozenset({"fallback", "thin_section", "duplicate_copy"})
DISTINCTIVENESS_REPAIR_CODES = frozenset({"fallback", "duplicate_copy", "generic_heading"})
SEO_REPAIR_KINDS = ("hero", "about")


def verdict_for(score: float) -> str:
    for floor, label in VERDICTS:
        if score >= floor:
            return label
    return "Poor"


def _clamp(score: float) -> float:
    return round(max(0.0, min(10.0, score)), 2)


def _normalize_text(text: str) -> str:
    return re.sub(r"\s+", " ", re.sub(r"[^\w\s]", "", text.lower())).strip()


class IssueLedger:
    """Single accumulation point for issues raised while a run is in flight."""

    def __init__(self) -> None:
        self._issues: dict[tuple[str, str | None], QualityIssue] = {}

    def record(self, issue: QualityIssue) -> None:
        self._issues[(issue.code, issue.ref)] = issue

    def record_fallback(self, result: SectionResult) -> QualityIssue | None:
        if not result.used_fallback:
            return None
        content = result.content
        part = "copy" if content.source == "fallback" else "image direction"
        issue = QualityIssue(
            category=QualityCategory.content,
            severity=Severity.warning,
            message=f"Template {part} used for {content.kind} section after generation failed",
            suggested_fix="Regenerate this section once the generative service is healthy",
            page=content.page,
            section=content.kind,
            code="fallback",
        )
        self.record(issue)
        return issue

    def resolve(self, ref: str) -> bool:
        key = ("fallback", ref)
        return self._issues.pop(key, None) is not None

    def issues(self) -> list[QualityIssue]:
        return list(self._issues.values())

    def __len__(self) -> int:
        return len(self._issues)


class QualityGate:
    """Deterministic scoring of an assembled bundle plus repair targeting."""

    def __init__(
        self,
        *,
        threshold: float = DEFAULT_THRESHOLD,
        thresholds: Mapping[QualityCategory, float] | None = None,
        weights: Mapping[QualityCategory, float] = DEFAULT_WEIGHTS,
        max_repair_rounds: int = DEFAULT_MAX_REPAIR_ROUNDS,
        sections: Mapping[str, SectionDefinition] = DEFAULT_SECTIONS,
        thin_ratio: float = 0.4,
    ) -> None:
        self.threshold = threshold
        self.thresholds = dict(thresholds or {})
        self.weights = weights
        self.max_repair_rounds = max_repair_rounds
        self._sections = sections
        self._thin_ratio = thin_ratio

    def threshold_for(self, category: QualityCategory) -> float:
        return self.thresholds.get(category, self.threshold)

    def evaluate(
        self,
        pages: Sequence[PageArtifact],
        theme: GlobalTheme,
        requirements: Requirements,
        profile: IndustryProfile,
        *,
        recorded_issues: Iterable[QualityIssue] = (),
        missing_pages: Sequence[str] = (),
        rounds: int = 0,
    ) -> QualityReport:
        recorded = list(recorded_issues)
        fallback_refs = {issue.ref for issue in recorded if issue.code == "fallback" and issue.ref}
        issues: list[QualityIssue] = []

        scores = {
            QualityCategory.visual_design: self._score_visual(pages, theme, issues),
            QualityCategory.structure: self._score_structure(pages, missing_pages, issues),
            QualityCategory.content: self._score_content(pages, fallback_refs, issues),
            QualityCategory.trust_conversion: self._score_trust(pages, requirements, issues),
            QualityCategory.seo: self._score_seo(pages, issues),
            QualityCategory.distinctiveness: self._score_distinctiveness(pages, profile, fallback_refs, issues),
        }

        categories = [
            CategoryScore(
                category=category,
                score=scores[category],
                weight=self.weights.get(category, 0.0),
                threshold=self.threshold_for(category),
            )
            for category in QualityCategory
        ]
        total_weight = sum(entry.weight for entry in categories) or 1.0
        aggregate = round(sum(entry.score * entry.weight for entry in categories) / total_weight, 2)
        meets = all(entry.passed for entry in categories)

        for entry in categories:
            if not entry.passed:
                issues.append(
                    QualityIssue(
                        category=entry.category,
                        severity=Severity.error if entry.score < entry.threshold - 2 else Severity.warning,
                        message=f"{entry.category.value} scored {entry.score} (threshold {entry.threshold})",
                        suggested_fix=None,
                        code="below_threshold",
                    )
                )

        report = QualityReport(
            categories=categories,
            aggregate_score=aggregate,
            verdict=verdict_for(aggregate),
            meets_thresholds=meets,
            issues=[*recorded, *issues],
            rounds=rounds,
        )
        logger.info(
            "Quality evaluated",
            extra={
                "aggregate_score": aggregate,
                "verdict": report.verdict,
                "meets_thresholds": meets,
                "failing": [category.value for category in report.failing_categories],
                "round": rounds,
            },
        )
        return report

    def repair_targets(self, report: QualityReport, pages: Sequence[PageArtifact]) -> dict[str, list[str]]:
        """Map failing categories to the sections worth regenerating.

        Keys are ``page/kind`` refs; values are revision notes for the prompt.
        """
        failing = set(report.failing_categories)
        targets: dict[str, list[str]] = {}

        def _add(ref: str, note: str | None) -> None:
            notes = targets.setdefault(ref, [])
            if note and note not in notes:
                notes.append(note)

        codes: set[str] = set()
        if QualityCategory.content in failing:
            codes |= CONTENT_REPAIR_CODES
        if QualityCategory.distinctiveness in failing:
            codes |= DISTINCTIVENESS_REPAIR_CODES
        if codes:
            for issue in report.issues:
                if issue.code in codes and issue.page and issue.section:
                    _add(f"{issue.page}/{issue.section}", issue.suggested_fix or issue.message)

        if QualityCategory.seo in failing:
            by_slug = {page.slug: page for page in pages}
            for issue in report.issues:
                if issue.category != QualityCategory.seo or not issue.page or issue.page not in by_slug:
                    continue
                page = by_slug[issue.page]
                for kind in SEO_REPAIR_KINDS:
                    if page.section(kind) is not None:
                        _add(f"{page.slug}/{kind}", issue.suggested_fix or issue.message)

        return targets

    def _score_visual(self, pages: Sequence[PageArtifact], theme: GlobalTheme, issues: list[QualityIssue]) -> float:
        score = 10.0
        colors = theme.colors
        body_contrast = contrast_ratio(colors.text, colors.background)
        if body_contrast < 4.5:
            score -= 3.0
            issues.append(
                QualityIssue(
                    category=QualityCategory.visual_design,
                    severity=Severity.error,
                    message=f"Body text contrast is {body_contrast:.2f}:1",
                    suggested_fix="Darken the text color or lighten the background to reach 4.5:1",
                    code="low_contrast",
                )
            )
        elif body_contrast < 7.0:
            score -= 0.5

        primary_contrast = contrast_ratio(colors.primary, colors.background)
        if primary_contrast < 3.0:
            score -= 1.5
            issues.append(
                QualityIssue(
                    category=QualityCategory.visual_design,
                    severity=Severity.warning,
                    message=f"Primary color contrast against the background is {primary_contrast:.2f}:1",
                    suggested_fix="Use a deeper primary color for buttons and links",
                    code="low_contrast",
                )
            )

        if theme.typography.heading_font == theme.typography.body_font:
            score -= 0.5

        if any(page.theme != theme for page in pages):
            score -= 5.0
            issues.append(
                QualityIssue(
                    category=QualityCategory.visual_design,
                    severity=Severity.error,
                    message="Pages carry divergent themes",
                    suggested_fix="Re-assemble every page with the shared theme",
                    code="theme_divergence",
                )
            )

        missing_alt = sum(
            1 for page in pages for section in page.sections for image in section.images if not image.alt_text.strip()
        )
        score -= min(2.0, 0.5 * missing_alt)
        return _clamp(score)

    def _score_structure(
        self,
        pages: Sequence[PageArtifact],
        missing_pages: Sequence[str],
        issues: list[QualityIssue],
    ) -> float:
        score = 10.0
        slugs = [page.slug for page in pages]
        for page in pages:
            kinds = [section.kind for section in page.sections]
            if not kinds or kinds[0] != "hero":
                score -= 2.0
                issues.append(
                    QualityIssue(
                        category=QualityCategory.structure,
                        severity=Severity.warning,
                        message="Page does not open with a hero section",
                        page=page.slug,
                        code="missing_hero",
                    )
                )
            if not kinds or kinds[-1] not in CLOSING_KINDS:
                score -= 1.5
                issues.append(
                    QualityIssue(
                        category=QualityCategory.structure,
                        severity=Severity.warning,
                        message="Page does not end with a call to action or contact section",
                        page=page.slug,
                        code="missing_closing",
                    )
                )
            if [link.slug for link in page.navigation] != slugs:
                score -= 1.0
                issues.append(
                    QualityIssue(
                        category=QualityCategory.structure,
                        severity=Severity.warning,
                        message="Navigation does not match the assembled page list",
                        page=page.slug,
                        code="navigation_mismatch",
                    )
                )
        for slug in missing_pages:
            score -= 2.0
            issues.append(
                QualityIssue(
                    category=QualityCategory.structure,
                    severity=Severity.error,
                    message="Requested page could not be generated",
                    suggested_fix="Retry the run once the generative service is available",
                    page=slug,
                    code="missing_page",
                )
            )
        return _clamp(score)

    def _score_content(
        self,
        pages: Sequence[PageArtifact],
        fallback_refs: set[str],
        issues: list[QualityIssue],
    ) -> float:
        sections = [section for page in pages for section in page.sections]
        if not sections:
            return 0.0

        thin = 0
        for section in sections:
            if section.ref in fallback_refs:
                continue
            definition = self._sections.get(section.kind)
            target = definition.word_count if definition else 40
            if section.word_count < max(8, int(target * self._thin_ratio)):
                thin += 1
                issues.append(
                    QualityIssue(
                        category=QualityCategory.content,
                        severity=Severity.warning,
                        message=f"Section has {section.word_count} words; about {target} expected",
                        suggested_fix=f"Expand the copy to roughly {target} words",
                        page=section.page,
                        section=section.kind,
                        code="thin_section",
                    )
                )

        bodies = Counter(_normalize_text(section.body) for section in sections if section.ref not in fallback_refs)
        duplicated = 0
        for section in sections:
            if section.ref in fallback_refs:
                continue
            if bodies[_normalize_text(section.body)] > 1:
                duplicated += 1
                issues.append(
                    QualityIssue(
                        category=QualityCategory.content,
                        severity=Severity.warning,
                        message="Section body repeats copy used elsewhere on the site",
                        suggested_fix="Rewrite the section with page-specific copy",
                        page=section.page,
                        section=section.kind,
                        code="duplicate_copy",
                    )
                )

        total = len(sections)
        fallback = sum(1 for section in sections if section.ref in fallback_refs)
        score = 10.0 * (1.0 - 0.6 * fallback / total - 0.3 * thin / total - 0.3 * duplicated / total)
        return _clamp(score)

    def _score_trust(
        self,
        pages: Sequence[PageArtifact],
        requirements: Requirements,
        issues: list[QualityIssue],
    ) -> float:
        kinds = {section.kind for page in pages for section in page.sections}
        score = 4.0
        if "contact" in kinds:
            score += 2.0
        else:
            issues.append(
                QualityIssue(
                    category=QualityCategory.trust_conversion,
                    severity=Severity.warning,
                    message="No contact section on any page",
                    suggested_fix="Add a contact section",
                    code="missing_contact",
                )
            )

        hero_ctas = [page.section("hero") for page in pages]
        if hero_ctas and all(hero is not None and hero.cta_label for hero in hero_ctas):
            score += 1.5
        else:
            issues.append(
                QualityIssue(
                    category=QualityCategory.trust_conversion,
                    severity=Severity.info,
                    message="Some hero sections have no call to action",
                    suggested_fix="Give every hero a primary call to action",
                    code="missing_cta",
                )
            )

        if requirements.phone or requirements.email:
            score += 1.5
        else:
            issues.append(
                QualityIssue(
                    category=QualityCategory.trust_conversion,
                    severity=Severity.info,
                    message="No phone number or email address supplied",
                    suggested_fix="Provide direct contact details",
                    code="missing_contact_details",
                )
            )

        if kinds & SOCIAL_PROOF_KINDS:
            score += 1.0
        return _clamp(score)

    def _score_seo(self, pages: Sequence[PageArtifact], issues: list[QualityIssue]) -> float:
        if not pages:
            return 0.0
        titles = Counter(page.seo.title for page in pages if page.seo)
        page_scores = []
        for page in pages:
            seo = page.seo
            if seo is None:
                page_scores.append(0.0)
                issues.append(
                    QualityIssue(
                        category=QualityCategory.seo,
                        severity=Severity.error,
                        message="Page has no SEO metadata",
                        page=page.slug,
                        code="missing_seo",
                    )
                )
                continue

            score = 10.0
            problems: list[str] = []
            if not 10 <= len(seo.title) <= 60:
                score -= 2.0
                problems.append("title length outside 10-60 characters")
            if titles[seo.title] > 1:
                score -= 1.5
                problems.append("title duplicated across pages")
            if seo.placeholder:
                score -= 3.0
                problems.append("description is a placeholder")
            elif len(seo.description) < 50:
                score -= 2.0
                problems.append("description shorter than 50 characters")
            if not seo.h1:
                score -= 1.5
                problems.append("missing h1")
            if len(seo.keywords) < 3:
                score -= 1.0
                problems.append("fewer than 3 keywords")
            if not seo.structured_data:
                score -= 1.0
                problems.append("no structured data")

            if problems:
                issues.append(
                    QualityIssue(
                        category=QualityCategory.seo,
                        severity=Severity.warning,
                        message="; ".join(problems),
                        suggested_fix="Write a descriptive hero heading and an about paragraph of at least two sentences",
                        page=page.slug,
                        code="weak_metadata",
                    )
                )
            page_scores.append(max(0.0, score))
        return _clamp(sum(page_scores) / len(page_scores))

    def _score_distinctiveness(
        self,
        pages: Sequence[PageArtifact],
        profile: IndustryProfile,
        fallback_refs: set[str],
        issues: list[QualityIssue],
    ) -> float:
        sections = [section for page in pages for section in page.sections]
        if not sections:
            return 0.0
        score = 10.0
        score -= 3.0 * sum(1 for section in sections if section.ref in fallback_refs) / len(sections)

        copy = " ".join(
            _normalize_text(" ".join([section.heading, section.body])) for section in sections
        )
        if profile.power_words and not any(word.lower() in copy for word in profile.power_words):
            score -= 2.0
            issues.append(
                QualityIssue(
                    category=QualityCategory.distinctiveness,
                    severity=Severity.info,
                    message="Copy uses none of the industry's signature vocabulary",
                    suggested_fix="Work in words such as " + ", ".join(profile.power_words[:3]),
                    code="generic_vocabulary",
                )
            )

        headings = Counter(_normalize_text(section.heading) for section in sections if section.ref not in fallback_refs)
        repeated = 0
        for section in sections:
            if section.ref in fallback_refs or headings[_normalize_text(section.heading)] < 2:
                continue
            repeated += 1
            issues.append(
                QualityIssue(
                    category=QualityCategory.distinctiveness,
                    severity=Severity.info,
                    message="Heading repeats on several sections",
                    suggested_fix="Give this section a heading specific to its page",
                    page=section.page,
                    section=section.kind,
                    code="generic_heading",
                )
            )
        score -= min(3.0, 0.5 * repeated)

        if profile.id == DEFAULT_PROFILE_ID:
            score -= 1.0
        return _clamp(score)


__all__ = [
    "QualityGate",
    "IssueLedger",
    "verdict_for",
    "DEFAULT_WEIGHTS",
    "DEFAULT_THRESHOLD",
    "DEFAULT_MAX_REPAIR_ROUNDS",
]
