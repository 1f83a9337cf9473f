from __future__ import annotations

import json
import logging

import httpx
from fastapi.responses import HTMLResponse

from wikiserver.core.errors import APIError
from wikiserver.models import GistFile, GistPayload, PageData, ViewModel
from wikiserver.services.views import ViewOrchestrator
from wikiserver.storage import StorageError, WikiStorage

logger = logging.getLogger("wikiserver")

GIST_HOST = "api.github.com"
GIST_PORT = 443
GIST_PATH = "/gists"
GIST_URL = f"https://{GIST_HOST}:{GIST_PORT}{GIST_PATH}"
GIST_HEADERS = {
    "Accept": "application/vnd.github.v3+json",
    "Content-Type": "application/json",
}


def build_gist_payload(pages: list[PageData]) -> GistPayload:
    payload = GistPayload()
    for page in pages:
        payload.files[page.name] = GistFile(content=page.content)
    return payload


def describe_failure(resp: httpx.Response) -> str:
    message = f"Could not backup the wiki: {resp.reason_phrase}"
    if not resp.content:
        return message
    try:
        detail = json.dumps(resp.json(), indent=2)
    except ValueError:
        detail = resp.text
    return f"{message}\n{detail}"


class BackupOrchestrator:
    """Exports every page into a new public gist, then renders the home page with its URL."""

    def __init__(self, storage: WikiStorage, client: httpx.AsyncClient, views: ViewOrchestrator):
        self.storage = storage
        self.client = client
        self.views = views

    async def backup(self) -> HTMLResponse:
        try:
            pages = await self.storage.fetch_all_pages_data()
        except StorageError as e:
            raise APIError(500, "backend_error", f"fetch all pages data failed: {e.message}")

        payload = build_gist_payload(pages)

        try:
            resp = await self.client.post(
                GIST_URL,
                content=payload.model_dump_json(),
                headers=GIST_HEADERS,
            )
        except httpx.RequestError as e:
            logger.error("HTTP Client error", exc_info=e)
            raise APIError(500, "backup_transport_error", f"HTTP Client error: {e}")

        if resp.status_code != 201:
            message = describe_failure(resp)
            logger.error(message)
            raise APIError(502, "backup_failed", message, details={"upstream_status": resp.status_code})

        try:
            body = resp.json()
        except ValueError:
            body = None
        gist_url = body.get("html_url") if isinstance(body, dict) else None
        logger.info("Wiki backed up to %s (%d pages)", gist_url, len(pages))
        return await self.views.render_home(ViewModel(backup_gist_url=gist_url))
