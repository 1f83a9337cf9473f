import asyncio

import pytest

from wikiserver.models import EMPTY_PAGE_MARKDOWN, PageLookup
from wikiserver.rendering import MarkdownConverter, RenderError, TemplateRenderer
from wikiserver.services.views import ViewOrchestrator
from wikiserver.storage import InMemoryWikiStorage, StorageError


def test_home_lists_no_pages(client, rendered):
    r = client.get("/")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "The wiki is currently empty!" in r.text

    template, model = rendered[-1]
    assert template == "index"
    assert model["title"] == "Wiki home"
    assert model["pages"] == []
    assert model["backup_gist_url"] is None


def test_home_lists_created_pages_in_order(client, rendered):
    for title in ("Zebra", "Apple"):
        client.post("/save", data={"title": title, "markdown": "# x", "newPage": "yes"}, follow_redirects=False)

    r = client.get("/")
    assert r.status_code == 200
    assert 'href="/wiki/Apple"' in r.text
    assert [p["name"] for p in rendered[-1][1]["pages"]] == ["Apple", "Zebra"]


def test_unknown_page_renders_default_markdown(client, rendered):
    r = client.get("/wiki/Nowhere")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")

    template, model = rendered[-1]
    assert template == "page"
    assert model["title"] == "Nowhere"
    assert model["new_page"] == "yes"
    assert model["id"] == -1
    assert model["raw_content"] == EMPTY_PAGE_MARKDOWN
    assert model["content"] == MarkdownConverter().to_html(EMPTY_PAGE_MARKDOWN)
    assert model["timestamp"]
    # no delete form for a page that does not exist yet
    assert 'action="/delete"' not in r.text


def test_saved_page_renders_markdown(client, rendered):
    markdown = "# Hello\n\nSome *emphasis* here.\n"
    r = client.post("/save", data={"title": "Hello", "markdown": markdown, "newPage": "yes"}, follow_redirects=False)
    assert r.status_code == 303

    r = client.get("/wiki/Hello")
    assert r.status_code == 200
    model = rendered[-1][1]
    assert model["new_page"] == "no"
    assert model["id"] == 1
    assert model["raw_content"] == markdown
    assert model["content"] == MarkdownConverter().to_html(markdown)
    assert "<em>emphasis</em>" in r.text
    assert 'action="/delete"' in r.text


def test_backend_failure_is_a_server_error(client, storage, monkeypatch):
    async def boom():
        raise StorageError(504, "database down")

    monkeypatch.setattr(storage, "fetch_all_pages", boom)
    r = client.get("/")
    assert r.status_code == 500
    body = r.json()
    assert body["code"] == "backend_error"
    assert "database down" in body["message"]


def test_render_failure_is_a_server_error(client, monkeypatch):
    def broken(self, model, template_name):
        raise RenderError("template 'page' failed: boom")

    monkeypatch.setattr(TemplateRenderer, "render", broken)
    r = client.get("/wiki/Anything")
    assert r.status_code == 500
    assert r.json()["code"] == "render_error"


class _SlowStorage(InMemoryWikiStorage):
    async def fetch_page(self, name):
        # yield so both lookups are in flight together
        await asyncio.sleep(0.01 if name == "First" else 0)
        return PageLookup(found=True, id=len(name), raw_content=f"# {name}\n")


@pytest.mark.asyncio
async def test_concurrent_page_views_keep_their_own_model(monkeypatch):
    seen = []
    original = TemplateRenderer.render

    def spy(self, model, template_name):
        seen.append(dict(model))
        return original(self, model, template_name)

    monkeypatch.setattr(TemplateRenderer, "render", spy)
    views = ViewOrchestrator(_SlowStorage(), TemplateRenderer(), MarkdownConverter())

    first, second = await asyncio.gather(views.render_page("First"), views.render_page("Second"))

    assert "<h1>First</h1>" in first.body.decode()
    assert "<h1>Second</h1>" in second.body.decode()
    by_title = {m["title"]: m for m in seen}
    assert by_title["First"]["raw_content"] == "# First\n"
    assert by_title["First"]["id"] == 5
    assert by_title["Second"]["raw_content"] == "# Second\n"
    assert by_title["Second"]["id"] == 6
