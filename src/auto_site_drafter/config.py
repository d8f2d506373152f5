from __future__ import annotations

import os

from pydantic import BaseModel, Field

ENV_PREFIX = "SITE_DRAFTER_"


class PipelineSettings(BaseModel):
    """Tunable limits for one generation run."""

    max_concurrency: int = Field(default=4, ge=1)
    max_attempts: int = Field(default=3, ge=1)
    base_delay_seconds: float = Field(default=0.5, ge=0.0)
    call_timeout_seconds: float = Field(default=20.0, gt=0.0)
    run_timeout_seconds: float = Field(default=300.0, gt=0.0)
    quality_threshold: float = Field(default=7.5, ge=0.0, le=10.0)
    max_repair_rounds: int = Field(default=2, ge=0)
    asset_base_path: str = "/assets"
    site_base_url: str = "https://example.com"
    render_html: bool = True

    @classmethod
    def from_env(cls) -> "PipelineSettings":
        values: dict[str, str] = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw
        return cls.model_validate(values)


__all__ = ["PipelineSettings", "ENV_PREFIX"]
