from __future__ import annotations

from enum import Enum
from typing import Sequence

from pydantic import BaseModel, Field


class QualityCategory(str, Enum):
    visual_design = "visual_design"
    structure = "structure"
    content = "content"
    trust_conversion = "trust_conversion"
    seo = "seo"
    distinctiveness = "distinctiveness"


class Severity(str, Enum):
    info = "info"
    warning = "warning"
    error = "error"


class QualityIssue(BaseModel):
    category: QualityCategory
    severity: Severity
    message: str
    suggested_fix: str | None = None
    page: str | None = None
    section: str | None = None
    code: str = "quality"

    @property
    def ref(self) -> str | None:
        if self.page and self.section:
            return f"{self.page}/{self.section}"
        return self.page


class CategoryScore(BaseModel):
    category: QualityCategory
    score: float
    weight: float
    threshold: float

    @property
    def passed(self) -> bool:
        return self.score >= self.threshold


class QualityReport(BaseModel):
    categories: Sequence[CategoryScore]
    aggregate_score: float
    verdict: str
    meets_thresholds: bool
    issues: Sequence[QualityIssue] = Field(default_factory=list)
    rounds: int = 0

    def score_for(self, category: QualityCategory) -> float:
        for entry in self.categories:
            if entry.category == category:
                return entry.score
        raise KeyError(category)

    @property
    def failing_categories(self) -> list[QualityCategory]:
        return [entry.category for entry in self.categories if not entry.passed]


__all__ = ["QualityReport", "QualityIssue", "QualityCategory", "CategoryScore", "Severity"]
