from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Optional, Sequence

import jinja2

from .dictionaries import CLOSING_SECTIONS
from .models.bundle import PageArtifact
from .models.requirements import Requirements
from .models.theme import GlobalTheme

logger = logging.getLogger(__name__)

THEME_CSS_PATH = "assets/css/theme.css"


class SiteRenderer:
    """Render assembled pages into static HTML files sharing one stylesheet."""

    _jinja_env: Optional[jinja2.Environment] = None

    def render(
        self,
        pages: Sequence[PageArtifact],
        theme: GlobalTheme,
        requirements: Requirements,
    ) -> dict[str, str]:
        """Return a mapping of relative file path to file contents."""
        env = self._get_jinja_env()
        page_template = env.get_template("page.html.j2")
        stylesheet = f"{theme.asset_base_path.rstrip('/')}/css/theme.css"
        year = datetime.utcnow().year

        contact_page = next((page for page in pages if page.page_type == "contact"), None)

        files: dict[str, str] = {THEME_CSS_PATH: self.render_css(theme)}
        for page in pages:
            files[page.filename] = page_template.render(
                page=page,
                theme=theme,
                business=requirements.business_name,
                requirements=requirements,
                stylesheet=stylesheet,
                year=year,
                cta_href=self.cta_href(page, contact_page),
            )
        logger.info("Rendered static site", extra={"files": len(files)})
        return files

    def cta_href(self, page: PageArtifact, contact_page: PageArtifact | None) -> str:
        """Link target for call-to-action buttons on ``page``.

        Prefers a separate contact page, then the page's own contact section,
        then its closing section.
        """
        if contact_page is not None and contact_page.slug != page.slug:
            return contact_page.filename
        kinds = [section.kind for section in page.sections]
        if "contact" in kinds:
            return "#contact"
        closing = [kind for kind in kinds if kind in CLOSING_SECTIONS] or kinds
        return f"#{closing[-1]}" if closing else "index.html"

    def render_css(self, theme: GlobalTheme) -> str:
        template = self._get_jinja_env().get_template("theme.css.j2")
        return template.render(variables=theme.css_variables(), theme=theme)

    def _get_jinja_env(self) -> jinja2.Environment:
        if SiteRenderer._jinja_env is None:
            template_dir = os.path.join(os.path.dirname(__file__), "templates")
            SiteRenderer._jinja_env = jinja2.Environment(
                loader=jinja2.FileSystemLoader(template_dir),
                autoescape=jinja2.select_autoescape(enabled_extensions=("html", "html.j2"), default=False),
                trim_blocks=True,
                lstrip_blocks=True,
            )
        return SiteRenderer._jinja_env


__all__ = ["SiteRenderer", "THEME_CSS_PATH"]
