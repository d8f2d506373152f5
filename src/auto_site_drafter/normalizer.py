from __future__ import annotations

import re
from typing import Any, Mapping

from pydantic import ValidationError

from .errors import RequirementsValidationError
from .models.requirements import BrandPreferences, Requirements, ServiceOffering

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_COLOR_FIELDS = ("primary_color", "secondary_color", "accent_color", "background_color", "text_color")

DEFAULT_PAGES = ("Home",)
DEFAULT_TONE = "Professional and friendly"
DEFAULT_AUDIENCE = "local customers"
DEFAULT_GOAL = "generate enquiries"


def normalize_hex(value: str) -> str:
    match = _HEX_RE.match(value.strip())
    if not match:
        raise ValueError(f"not a hex color: {value!r}")
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"#{digits.upper()}"


class RequirementsNormalizer:
    """Validate caller input and fill defaults. Pure; no I/O."""

    def __init__(
        self,
        *,
        default_pages: tuple[str, ...] = DEFAULT_PAGES,
        default_tone: str = DEFAULT_TONE,
        default_audience: str = DEFAULT_AUDIENCE,
        default_goal: str = DEFAULT_GOAL,
    ) -> None:
        self._default_pages = default_pages
        self._default_tone = default_tone
        self._default_audience = default_audience
        self._default_goal = default_goal

    def normalize(self, payload: Mapping[str, Any] | Requirements) -> Requirements:
        try:
            raw = payload if isinstance(payload, Requirements) else Requirements.model_validate(payload)
        except ValidationError as exc:
            raise RequirementsValidationError(
                "Requirements failed validation",
                errors=exc.errors(include_url=False, include_context=False, include_input=False),
            ) from exc

        business_name = " ".join(raw.business_name.split())
        if not business_name:
            raise RequirementsValidationError(
                "businessName must not be empty",
                errors=[{"loc": ["businessName"], "msg": "empty"}],
            )

        pages = self._normalize_pages(raw.pages)

        services = tuple(
            ServiceOffering(name=" ".join(service.name.split()), description=service.description.strip())
            for service in raw.services
            if service.name.strip()
        )

        return Requirements(
            business_name=business_name,
            industry=raw.industry.strip(),
            description=raw.description.strip(),
            location=(raw.location or "").strip() or None,
            target_audience=raw.target_audience.strip() or self._default_audience,
            tone=raw.tone.strip() or self._default_tone,
            primary_goal=raw.primary_goal.strip() or self._default_goal,
            tagline=(raw.tagline or "").strip() or None,
            phone=(raw.phone or "").strip() or None,
            email=raw.email,
            services=services,
            pages=pages,
            features=tuple(dict.fromkeys(f.strip().lower() for f in raw.features if f.strip())),
            brand=self._normalize_brand(raw.brand),
        )

    def _normalize_pages(self, pages) -> tuple[str, ...]:
        seen: set[str] = set()
        result: list[str] = []
        for page in pages:
            name = " ".join(str(page).split())
            if not name or name.lower() in seen:
                continue
            seen.add(name.lower())
            result.append(name)
        return tuple(result) or self._default_pages

    def _normalize_brand(self, brand: BrandPreferences) -> BrandPreferences:
        values: dict[str, Any] = {}
        errors: list[dict[str, Any]] = []
        for field in _COLOR_FIELDS:
            value = getattr(brand, field)
            if value is None or not value.strip():
                values[field] = None
                continue
            try:
                values[field] = normalize_hex(value)
            except ValueError as exc:
                errors.append({"loc": ["brand", field], "msg": str(exc)})
        if errors:
            raise RequirementsValidationError("Brand colors must be hex values", errors=errors)
        values["heading_font"] = (brand.heading_font or "").strip() or None
        values["body_font"] = (brand.body_font or "").strip() or None
        values["style_keywords"] = tuple(
            dict.fromkeys(k.strip().lower() for k in brand.style_keywords if k.strip())
        )
        return BrandPreferences(**values)


def normalize_requirements(payload: Mapping[str, Any] | Requirements) -> Requirements:
    return RequirementsNormalizer().normalize(payload)


__all__ = ["RequirementsNormalizer", "normalize_requirements", "normalize_hex"]
