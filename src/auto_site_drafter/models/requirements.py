from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ServiceOffering(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""


class BrandPreferences(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    primary_color: str | None = Field(default=None, alias="primaryColor")
    secondary_color: str | None = Field(default=None, alias="secondaryColor")
    accent_color: str | None = Field(default=None, alias="accentColor")
    background_color: str | None = Field(default=None, alias="backgroundColor")
    text_color: str | None = Field(default=None, alias="textColor")
    heading_font: str | None = Field(default=None, alias="headingFont")
    body_font: str | None = Field(default=None, alias="bodyFont")
    style_keywords: Sequence[str] = Field(default_factory=tuple, alias="styleKeywords")


class Requirements(BaseModel):
    """Validated business profile consumed read-only by every pipeline stage."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "businessName": "Aurora Design Studio",
                "industry": "interior design studio",
                "description": "Boutique studio for residential interiors",
                "location": "Portland, OR",
                "targetAudience": "Homeowners renovating their first home",
                "tone": "Warm and confident",
                "services": [
                    {"name": "Full-home design", "description": "Concept to install"},
                    {"name": "Color consultation", "description": "Palettes that fit"},
                ],
                "pages": ["Home", "Services", "About", "Contact"],
                "features": ["contact form", "testimonials"],
                "brand": {"primaryColor": "#2B3A55", "styleKeywords": ["minimal"]},
            }
        },
    )

    business_name: str = Field(alias="businessName")
    industry: str = ""
    description: str = ""
    location: str | None = None
    target_audience: str = Field(default="", alias="targetAudience")
    tone: str = ""
    primary_goal: str = Field(default="", alias="primaryGoal")
    tagline: str | None = None
    phone: str | None = None
    email: EmailStr | None = None
    services: Sequence[ServiceOffering] = Field(default_factory=tuple)
    pages: Sequence[str] = Field(default_factory=tuple)
    features: Sequence[str] = Field(default_factory=tuple)
    brand: BrandPreferences = Field(default_factory=BrandPreferences)

    def context_summary(self) -> str:
        services = ", ".join(service.name for service in self.services) or "not specified"
        lines = [
            f"Business: {self.business_name}",
            f"Industry: {self.industry or 'general'}",
            f"Audience: {self.target_audience}",
            f"Goal: {self.primary_goal}",
            f"Services: {services}",
        ]
        if self.location:
            lines.append(f"Location: {self.location}")
        if self.description:
            lines.append(f"About: {self.description}")
        return "\n".join(lines)


__all__ = ["Requirements", "ServiceOffering", "BrandPreferences"]
