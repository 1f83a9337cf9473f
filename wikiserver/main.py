import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from .config import Settings
from .core.errors import APIError, api_error_handler
from .log_utils import inject_request_id, setup_logging
from .rendering import MarkdownConverter, TemplateRenderer
from .routers.wiki import router as wiki_router
from .services import BackupOrchestrator, MutationOrchestrator, ViewOrchestrator
from .storage import WikiStorage, storage_from_settings


load_dotenv()
setup_logging()
logger = logging.getLogger("wikiserver")


def gist_client_from_settings(settings: Settings) -> httpx.AsyncClient:
    headers = {"User-Agent": settings.user_agent}
    if settings.github_token:
        headers["Authorization"] = f"token {settings.github_token}"
    return httpx.AsyncClient(headers=headers)


def create_app(
    settings: Settings | None = None,
    storage: WikiStorage | None = None,
    gist_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = storage or storage_from_settings(settings)
        client = gist_client or gist_client_from_settings(settings)
        views = ViewOrchestrator(db, TemplateRenderer(), MarkdownConverter())
        app.state.views = views
        app.state.mutations = MutationOrchestrator(db)
        app.state.backup = BackupOrchestrator(db, client, views)
        logger.info("HTTP server running on port %d (storage: %s)", settings.http_port, type(db).__name__)
        try:
            yield
        finally:
            await client.aclose()
            await db.close()

    app = FastAPI(
        title="Wiki",
        version="0.3.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings

    @app.middleware("http")
    async def add_req_id(request, call_next):
        return await inject_request_id(request, call_next)

    app.add_exception_handler(APIError, api_error_handler)
    app.include_router(wiki_router)
    return app


app = create_app()


def run() -> None:
    settings = app.state.settings
    uvicorn.run(app, host="0.0.0.0", port=settings.http_port)


if __name__ == "__main__":
    run()
