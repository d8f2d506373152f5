from __future__ import annotations

from typing import Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field


class ImageDirective(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt: str
    alt_text: str
    slot: str = "primary"
    asset_path: str | None = None


class SectionContent(BaseModel):
    """Copy and imagery produced for one planned section."""

    model_config = ConfigDict(frozen=True)

    page: str
    kind: str
    variant: str = "default"
    heading: str
    subheading: str = ""
    body: str
    bullets: Sequence[str] = Field(default_factory=tuple)
    cta_label: str | None = None
    images: Sequence[ImageDirective] = Field(default_factory=tuple)
    source: Literal["generated", "fallback"] = "generated"
    attempts: int = 1

    @property
    def ref(self) -> str:
        return f"{self.page}/{self.kind}"

    @property
    def word_count(self) -> int:
        text = " ".join([self.heading, self.subheading, self.body, *self.bullets])
        return len(text.split())


__all__ = ["SectionContent", "ImageDirective"]
