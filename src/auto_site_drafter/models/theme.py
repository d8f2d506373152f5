from __future__ import annotations

from typing import Mapping, Sequence

from pydantic import BaseModel, ConfigDict


class ColorTokens(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary: str
    secondary: str
    accent: str
    background: str
    text: str
    muted: str
    surface: str


class TypographyScale(BaseModel):
    model_config = ConfigDict(frozen=True)

    heading_font: str
    body_font: str
    base_size_px: int = 16
    scale_ratio: float = 1.25
    sizes: Mapping[str, str]


class ComponentVariants(BaseModel):
    model_config = ConfigDict(frozen=True)

    button: str
    card: str
    hero: str
    navigation: str


class GlobalTheme(BaseModel):
    """Token set shared by every page of one generation run."""

    model_config = ConfigDict(frozen=True)

    name: str
    colors: ColorTokens
    typography: TypographyScale
    spacing: Sequence[str]
    radius: Mapping[str, str]
    shadow: Mapping[str, str]
    components: ComponentVariants
    asset_base_path: str = "/assets"

    def css_variables(self) -> dict[str, str]:
        variables: dict[str, str] = {}
        for token, value in self.colors.model_dump().items():
            variables[f"--color-{token}"] = value
        variables["--font-heading"] = self.typography.heading_font
        variables["--font-body"] = self.typography.body_font
        for step, size in self.typography.sizes.items():
            variables[f"--text-{step}"] = size
        for index, value in enumerate(self.spacing):
            variables[f"--space-{index}"] = value
        for step, value in self.radius.items():
            variables[f"--radius-{step}"] = value
        for step, value in self.shadow.items():
            variables[f"--shadow-{step}"] = value
        return variables


__all__ = ["GlobalTheme", "ColorTokens", "TypographyScale", "ComponentVariants"]
