from __future__ import annotations

from pathlib import Path

import jinja2
import markdown
from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


class RenderError(Exception):
    pass


class TemplateRenderer:
    """Renders a view model with ``<name>.html`` from the templates directory."""

    def __init__(self, directory: str | Path = TEMPLATES_DIR):
        self.templates = Jinja2Templates(directory=str(directory))

    def render(self, model: dict, template_name: str) -> str:
        try:
            return self.templates.get_template(f"{template_name}.html").render(**model)
        except jinja2.TemplateError as e:
            raise RenderError(f"template '{template_name}' failed: {e}") from e


class MarkdownConverter:
    def __init__(self, extensions: list[str] | None = None):
        self.extensions = extensions if extensions is not None else ["fenced_code", "tables"]

    def to_html(self, text: str) -> str:
        return markdown.markdown(text or "", extensions=self.extensions)
