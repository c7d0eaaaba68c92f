import json
import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.core.settings import AppSettings

logger = logging.getLogger("content_api")
if not logger.handlers:
    logging.basicConfig(level=logging.INFO)

REQUEST_ID_HEADER = "X-Request-Id"


def log_event(event: str, request_id: str, **fields) -> None:
    payload = {"event": event, "request_id": request_id, **fields}
    logger.info(json.dumps(payload, ensure_ascii=False))


def configure_cors(app: FastAPI, settings: AppSettings) -> None:
    origins = settings.cors_allow_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # 通配来源不能携带凭据
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def configure_request_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        route = {"method": request.method, "path": request.url.path}
        started = time.perf_counter()

        log_event(
            "request_start",
            request_id,
            client=request.client.host if request.client else None,
            **route,
        )
        try:
            response = await call_next(request)
        except Exception as exc:
            log_event(
                "request_error",
                request_id,
                duration_ms=_elapsed_ms(started),
                error=repr(exc),
                **route,
            )
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        log_event(
            "request_end",
            request_id,
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
            **route,
        )
        return response
