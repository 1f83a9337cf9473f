import httpx
import pytest
from fastapi.testclient import TestClient

from wikiserver.config import Settings
from wikiserver.main import create_app
from wikiserver.rendering import TemplateRenderer
from wikiserver.storage import InMemoryWikiStorage


class FakeGistAPI:
    """Stands in for api.github.com; records every request it receives."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 201
        self.body = {"html_url": "https://gist.github.com/wiki-backup"}
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture
def storage():
    return InMemoryWikiStorage()


@pytest.fixture
def gist_api():
    return FakeGistAPI()


@pytest.fixture
def rendered(monkeypatch):
    """Capture (template_name, model) for every template render."""
    calls = []
    original = TemplateRenderer.render

    def spy(self, model, template_name):
        calls.append((template_name, dict(model)))
        return original(self, model, template_name)

    monkeypatch.setattr(TemplateRenderer, "render", spy)
    return calls


@pytest.fixture
def client(storage, gist_api):
    gist_client = httpx.AsyncClient(transport=httpx.MockTransport(gist_api.handler))
    app = create_app(settings=Settings(), storage=storage, gist_client=gist_client)
    with TestClient(app) as c:
        yield c
