from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from typing import Any

import httpx

from .models import PageData, PageLookup, PageSummary


class StorageError(Exception):
    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message


class WikiStorage(ABC):
    """Async access to the page-storage backend. Every failure raises StorageError."""

    @abstractmethod
    async def fetch_all_pages(self) -> list[PageSummary]: ...

    @abstractmethod
    async def fetch_page(self, name: str) -> PageLookup: ...

    @abstractmethod
    async def fetch_all_pages_data(self) -> list[PageData]: ...

    @abstractmethod
    async def create_page(self, name: str, markdown: str) -> None: ...

    @abstractmethod
    async def save_page(self, page_id: int, markdown: str) -> None: ...

    @abstractmethod
    async def delete_page(self, page_id: int) -> None: ...

    async def close(self) -> None:
        return None


def _column(row: dict, key: str, default: Any = None) -> Any:
    # database rows may come back with upper-case column names
    if key in row:
        return row[key]
    return row.get(key.upper(), default)


class HttpWikiStorage(WikiStorage):
    """Service proxy for the storage service listening on a named queue.

    Every operation is a ``POST {base_url}/{queue}`` carrying an ``action``
    header and a JSON body of arguments; the reply body is JSON.
    """

    def __init__(self, base_url: str, queue: str, client: httpx.AsyncClient | None = None, timeout_s: int = 10):
        self.base_url = base_url.rstrip("/")
        self.queue = queue
        self._client = client or httpx.AsyncClient(timeout=timeout_s)

    @property
    def address(self) -> str:
        return f"{self.base_url}/{self.queue}"

    async def _send(self, action: str, body: dict | None = None) -> Any:
        try:
            resp = await self._client.post(self.address, json=body or {}, headers={"action": action})
        except httpx.RequestError as e:
            raise StorageError(504, f"Network error talking to {self.queue}: {e}") from e
        if resp.is_error:
            raise StorageError(resp.status_code, f"{action} failed: {resp.text or resp.reason_phrase}")
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise StorageError(502, f"{action} returned invalid JSON") from e

    async def fetch_all_pages(self) -> list[PageSummary]:
        rows = await self._send("fetch-all-pages") or []
        pages = []
        for row in rows:
            if isinstance(row, str):
                pages.append(PageSummary(name=row))
            else:
                pages.append(PageSummary(name=_column(row, "name"), id=_column(row, "id")))
        return pages

    async def fetch_page(self, name: str) -> PageLookup:
        data = await self._send("fetch-page", {"name": name}) or {}
        return PageLookup(
            found=bool(data.get("found", False)),
            id=data.get("id"),
            raw_content=data.get("rawContent", data.get("raw_content")),
        )

    async def fetch_all_pages_data(self) -> list[PageData]:
        rows = await self._send("fetch-all-pages-data") or []
        return [PageData(name=_column(row, "name"), content=_column(row, "content", "") or "") for row in rows]

    async def create_page(self, name: str, markdown: str) -> None:
        await self._send("create-page", {"title": name, "markdown": markdown})

    async def save_page(self, page_id: int, markdown: str) -> None:
        await self._send("save-page", {"id": page_id, "markdown": markdown})

    async def delete_page(self, page_id: int) -> None:
        await self._send("delete-page", {"id": page_id})

    async def close(self) -> None:
        await self._client.aclose()


class InMemoryWikiStorage(WikiStorage):
    """Process-local backend for development and tests."""

    def __init__(self) -> None:
        self._pages: dict[int, dict[str, Any]] = {}
        self._ids = itertools.count(1)

    def _by_name(self, name: str) -> dict[str, Any] | None:
        for page in self._pages.values():
            if page["name"] == name:
                return page
        return None

    async def fetch_all_pages(self) -> list[PageSummary]:
        pages = sorted(self._pages.values(), key=lambda p: p["name"])
        return [PageSummary(name=p["name"], id=p["id"]) for p in pages]

    async def fetch_page(self, name: str) -> PageLookup:
        page = self._by_name(name)
        if page is None:
            return PageLookup(found=False)
        return PageLookup(found=True, id=page["id"], raw_content=page["content"])

    async def fetch_all_pages_data(self) -> list[PageData]:
        return [PageData(name=p["name"], content=p["content"]) for p in self._pages.values()]

    async def create_page(self, name: str, markdown: str) -> None:
        if self._by_name(name) is not None:
            raise StorageError(409, f"Page already exists: {name}")
        page_id = next(self._ids)
        self._pages[page_id] = {"id": page_id, "name": name, "content": markdown}

    async def save_page(self, page_id: int, markdown: str) -> None:
        page = self._pages.get(page_id)
        if page is not None:
            page["content"] = markdown

    async def delete_page(self, page_id: int) -> None:
        self._pages.pop(page_id, None)


def storage_from_settings(settings) -> WikiStorage:
    if settings.wikidb_url:
        return HttpWikiStorage(settings.wikidb_url, settings.wikidb_queue)
    return InMemoryWikiStorage()
