from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi.responses import RedirectResponse

from wikiserver.core.errors import APIError, bad_request, parse_page_id
from wikiserver.storage import StorageError, WikiStorage

logger = logging.getLogger("wikiserver")


def see_other(location: str) -> RedirectResponse:
    return RedirectResponse(location, status_code=303)


def page_location(name: str) -> str:
    # the name is a single path segment; "?", "#", "/" and "%" must not leak into the URL
    return f"/wiki/{quote(name, safe='')}"


class MutationOrchestrator:
    def __init__(self, storage: WikiStorage):
        self.storage = storage

    async def update_page(self, form: dict[str, str]) -> RedirectResponse:
        title = form.get("title") or ""
        markdown = form.get("markdown") or ""
        if not title:
            raise bad_request("title is required")
        try:
            if form.get("newPage") == "yes":
                await self.storage.create_page(title, markdown)
            else:
                # validated before touching the backend
                page_id = parse_page_id(form.get("id"))
                await self.storage.save_page(page_id, markdown)
        except StorageError as e:
            logger.error("Saving page %r failed: %s", title, e.message)
            raise APIError(500, "backend_error", f"save failed: {e.message}")
        return see_other(page_location(title))

    def create_page(self, form: dict[str, str]) -> RedirectResponse:
        name = form.get("name")
        if not name:
            return see_other("/")
        return see_other(page_location(name))

    async def delete_page(self, form: dict[str, str]) -> RedirectResponse:
        page_id = parse_page_id(form.get("id"))
        try:
            await self.storage.delete_page(page_id)
        except StorageError as e:
            logger.error("Deleting page %d failed: %s", page_id, e.message)
            raise APIError(500, "backend_error", f"delete failed: {e.message}")
        return see_other("/")
