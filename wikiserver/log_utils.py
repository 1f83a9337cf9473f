import json
import logging
import time
import uuid

from starlette.requests import Request
from starlette.responses import Response

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


async def inject_request_id(request: Request, call_next):
    req_id = request.headers.get("X-Request-Id", str(uuid.uuid4()))
    logger = logging.getLogger("wikiserver.access")
    request.state.req_id = req_id
    started = time.perf_counter()
    response: Response = await call_next(request)
    response.headers["X-Request-Id"] = req_id
    entry = {
        "msg": "request",
        "req_id": req_id,
        "method": request.method,
        "path": request.url.path,
        "status": response.status_code,
        "duration_ms": round((time.perf_counter() - started) * 1000, 1),
    }
    # APIError failures are logged at error level where they are raised
    logger.log(logging.WARNING if response.status_code >= 500 else logging.INFO, json.dumps(entry))
    return response
