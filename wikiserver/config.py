from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("wikiserver")

DEFAULT_HTTP_PORT = 8080
DEFAULT_WIKIDB_QUEUE = "wikidb.queue"
DEFAULT_USER_AGENT = "wikiserver"


def _port_from_env(raw: str | None) -> int:
    if not raw:
        return DEFAULT_HTTP_PORT
    try:
        port = int(raw)
    except ValueError:
        port = -1
    if not 0 < port < 65536:
        logger.warning("Ignoring invalid WIKI_HTTP_PORT=%r, using %d", raw, DEFAULT_HTTP_PORT)
        return DEFAULT_HTTP_PORT
    return port


@dataclass(frozen=True)
class Settings:
    http_port: int = DEFAULT_HTTP_PORT
    wikidb_queue: str = DEFAULT_WIKIDB_QUEUE
    wikidb_url: str = ""
    github_token: str = ""
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            http_port=_port_from_env(os.getenv("WIKI_HTTP_PORT")),
            wikidb_queue=os.getenv("WIKIDB_QUEUE", "") or DEFAULT_WIKIDB_QUEUE,
            wikidb_url=os.getenv("WIKIDB_URL", "").rstrip("/"),
            github_token=os.getenv("GITHUB_TOKEN", ""),
            user_agent=os.getenv("WIKI_USER_AGENT", "") or DEFAULT_USER_AGENT,
        )
