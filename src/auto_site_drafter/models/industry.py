from __future__ import annotations

from typing import Literal, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field


class Palette(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary: str
    secondary: str
    accent: str
    background: str
    text: str


class FontPairing(BaseModel):
    model_config = ConfigDict(frozen=True)

    heading: str
    body: str


class IndustryProfile(BaseModel):
    """Default visual and tonal guidance keyed by business-type keywords."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    keywords: Sequence[str]
    palette: Palette
    fonts: FontPairing
    border_radius: Literal["none", "small", "medium", "large"] = "medium"
    shadows: Literal["none", "subtle", "medium", "dramatic"] = "subtle"
    hero_style: Literal["full-bleed", "split", "minimal", "gradient"] = "split"
    section_recipe: Mapping[str, Sequence[str]] = Field(default_factory=dict)
    imagery: Mapping[str, str] = Field(default_factory=dict)
    image_style: str = ""
    tone: str = ""
    power_words: Sequence[str] = Field(default_factory=tuple)
    cta_texts: Sequence[str] = Field(default_factory=tuple)
    default_services: Sequence[str] = Field(default_factory=tuple)

    def recipe_for(self, page_type: str) -> Sequence[str] | None:
        return self.section_recipe.get(page_type)

    def image_prompt(self, slot: str) -> str:
        return self.imagery.get(slot) or self.imagery.get("hero", "")


__all__ = ["IndustryProfile", "Palette", "FontPairing"]
