from __future__ import annotations

import logging
from datetime import datetime

from fastapi.responses import HTMLResponse

from wikiserver.core.errors import APIError
from wikiserver.models import EMPTY_PAGE_MARKDOWN, ViewModel
from wikiserver.rendering import MarkdownConverter, RenderError, TemplateRenderer
from wikiserver.storage import StorageError, WikiStorage

logger = logging.getLogger("wikiserver")


def display_timestamp() -> str:
    return datetime.now().astimezone().strftime("%a %b %d %H:%M:%S %Z %Y")


class ViewOrchestrator:
    def __init__(self, storage: WikiStorage, renderer: TemplateRenderer, converter: MarkdownConverter):
        self.storage = storage
        self.renderer = renderer
        self.converter = converter

    def _html(self, model: ViewModel, template_name: str) -> HTMLResponse:
        try:
            body = self.renderer.render(model.model_dump(), template_name)
        except RenderError as e:
            logger.error("%s", e)
            raise APIError(500, "render_error", str(e))
        return HTMLResponse(body, status_code=200)

    async def render_home(self, model: ViewModel | None = None) -> HTMLResponse:
        """Render the page listing. ``model`` may already carry extra values (backup URL)."""
        model = model or ViewModel()
        try:
            pages = await self.storage.fetch_all_pages()
        except StorageError as e:
            logger.error("Fetching all pages failed: %s", e.message)
            raise APIError(500, "backend_error", f"fetch all pages failed: {e.message}")
        model.title = "Wiki home"
        model.pages = pages
        return self._html(model, "index")

    async def render_page(self, name: str) -> HTMLResponse:
        try:
            lookup = await self.storage.fetch_page(name)
        except StorageError as e:
            logger.error("Fetching page %r failed: %s", name, e.message)
            raise APIError(500, "backend_error", f"fetch page failed: {e.message}")
        raw_content = lookup.raw_content if lookup.raw_content is not None else EMPTY_PAGE_MARKDOWN
        model = ViewModel(
            title=name,
            id=lookup.id if lookup.id is not None else -1,
            new_page="no" if lookup.found else "yes",
            raw_content=raw_content,
            content=self.converter.to_html(raw_content),
            timestamp=display_timestamp(),
        )
        return self._html(model, "page")
