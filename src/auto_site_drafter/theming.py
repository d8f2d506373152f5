from __future__ import annotations

import logging
from typing import Mapping, Sequence

from .models.industry import IndustryProfile
from .models.requirements import Requirements
from .models.theme import ColorTokens, ComponentVariants, GlobalTheme, TypographyScale

logger = logging.getLogger(__name__)

RADIUS_BASE_PX: Mapping[str, int] = {"none": 0, "small": 4, "medium": 8, "large": 16}

SHADOW_SCALES: Mapping[str, Mapping[str, str]] = {
    "none": {"sm": "none", "md": "none", "lg": "none"},
    "subtle": {
        "sm": "0 1px 2px rgba(0, 0, 0, 0.05)",
        "md": "0 2px 6px rgba(0, 0, 0, 0.08)",
        "lg": "0 8px 20px rgba(0, 0, 0, 0.10)",
    },
    "medium": {
        "sm": "0 1px 3px rgba(0, 0, 0, 0.10)",
        "md": "0 4px 12px rgba(0, 0, 0, 0.15)",
        "lg": "0 12px 32px rgba(0, 0, 0, 0.18)",
    },
    "dramatic": {
        "sm": "0 2px 6px rgba(0, 0, 0, 0.25)",
        "md": "0 10px 30px rgba(0, 0, 0, 0.35)",
        "lg": "0 24px 60px rgba(0, 0, 0, 0.45)",
    },
}

SPACING_REM: Sequence[float] = (0, 0.25, 0.5, 1, 1.5, 2, 3, 4, 6)

TYPE_STEPS: Sequence[tuple[str, int]] = (
    ("xs", -2),
    ("sm", -1),
    ("base", 0),
    ("lg", 1),
    ("xl", 2),
    ("2xl", 3),
    ("3xl", 4),
    ("4xl", 5),
)


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def rgb_to_hex(rgb: tuple[float, float, float]) -> str:
    return "#" + "".join(f"{max(0, min(255, round(channel))):02X}" for channel in rgb)


def mix(color_a: str, color_b: str, weight: float) -> str:
    """Blend ``weight`` of ``color_b`` into ``color_a``."""
    a, b = hex_to_rgb(color_a), hex_to_rgb(color_b)
    return rgb_to_hex(tuple(ca + (cb - ca) * weight for ca, cb in zip(a, b)))


def relative_luminance(color: str) -> float:
    def channel(value: int) -> float:
        c = value / 255
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    r, g, b = hex_to_rgb(color)
    return 0.2126 * channel(r) + 0.7152 * channel(g) + 0.0722 * channel(b)


def contrast_ratio(color_a: str, color_b: str) -> float:
    lighter, darker = sorted((relative_luminance(color_a), relative_luminance(color_b)), reverse=True)
    return (lighter + 0.05) / (darker + 0.05)


class StyleSynthesizer:
    """Derive the run's single GlobalTheme from profile defaults and brand overrides."""

    def __init__(
        self,
        *,
        base_font_px: int = 16,
        default_ratio: float = 1.25,
        bold_ratio: float = 1.333,
        asset_base_path: str = "/assets",
    ) -> None:
        self._base_font_px = base_font_px
        self._default_ratio = default_ratio
        self._bold_ratio = bold_ratio
        self._asset_base_path = asset_base_path.rstrip("/") or "/assets"

    def synthesize(self, requirements: Requirements, profile: IndustryProfile) -> GlobalTheme:
        brand = requirements.brand
        keywords = set(brand.style_keywords)
        palette = profile.palette

        primary = brand.primary_color or palette.primary
        secondary = brand.secondary_color or palette.secondary
        accent = brand.accent_color or palette.accent
        background = brand.background_color or palette.background
        text = brand.text_color or palette.text

        colors = ColorTokens(
            primary=primary,
            secondary=secondary,
            accent=accent,
            background=background,
            text=text,
            muted=mix(text, background, 0.45),
            surface=mix(background, secondary, 0.06),
        )

        ratio = self._bold_ratio if keywords & {"bold", "dramatic", "striking"} else self._default_ratio
        typography = TypographyScale(
            heading_font=brand.heading_font or profile.fonts.heading,
            body_font=brand.body_font or profile.fonts.body,
            base_size_px=self._base_font_px,
            scale_ratio=ratio,
            sizes={step: f"{ratio ** power:.3f}rem" for step, power in TYPE_STEPS},
        )

        spacing_factor = 1.0
        if keywords & {"minimal", "airy", "spacious"}:
            spacing_factor = 1.25
        elif keywords & {"compact", "dense"}:
            spacing_factor = 0.85
        spacing = tuple(f"{value * spacing_factor:g}rem" for value in SPACING_REM)

        radius_label = profile.border_radius
        if "sharp" in keywords:
            radius_label = "none"
        elif "rounded" in keywords:
            radius_label = "large"
        base_radius = RADIUS_BASE_PX[radius_label]
        radius = {
            "sm": f"{base_radius // 2}px",
            "md": f"{base_radius}px",
            "lg": f"{base_radius * 2}px",
            "full": "9999px" if base_radius else "0px",
        }

        shadow_label = "none" if "flat" in keywords else profile.shadows
        components = ComponentVariants(
            button={"none": "square", "small": "square", "medium": "rounded", "large": "pill"}[radius_label],
            card=self._card_variant(shadow_label, keywords),
            hero="minimal" if "minimal" in keywords else profile.hero_style,
            navigation="dark" if relative_luminance(background) < 0.3 else "light",
        )

        theme = GlobalTheme(
            name=f"{profile.id}-theme",
            colors=colors,
            typography=typography,
            spacing=spacing,
            radius=radius,
            shadow=dict(SHADOW_SCALES[shadow_label]),
            components=components,
            asset_base_path=self._asset_base_path,
        )
        logger.info(
            "Synthesized global theme",
            extra={
                "profile": profile.id,
                "primary": colors.primary,
                "overrides": sorted(
                    name for name, value in brand.model_dump().items() if value and name != "style_keywords"
                ),
            },
        )
        return theme

    def _card_variant(self, shadow_label: str, keywords: set[str]) -> str:
        if "minimal" in keywords or shadow_label == "none":
            return "flat"
        if shadow_label == "subtle":
            return "outlined"
        return "elevated"


__all__ = ["StyleSynthesizer", "contrast_ratio", "mix", "relative_luminance"]
