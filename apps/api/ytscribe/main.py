"""FastAPI application entrypoint."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging
import threading

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from ytscribe.core.config import get_settings
from ytscribe.errors import ApiError
from ytscribe.repositories.memory import JobStore
from ytscribe.routes import jobs_router
from ytscribe.schemas.error import ErrorResponse
from ytscribe.services.worker import build_worker

logger = logging.getLogger(__name__)

_WORKER_JOIN_TIMEOUT_SECONDS = 10.0

_OPENAPI_RESPONSE_CODES: dict[str, dict[str, set[str]]] = {
    "/api/v1/jobs": {"post": {"200", "201", "422", "502"}, "get": {"200"}},
    "/api/v1/jobs/{jobId}": {"get": {"200", "404"}},
    "/api/v1/jobs/{jobId}/summarize": {"post": {"200", "404", "409", "502"}},
}

_SUBMIT_VALIDATION_PATHS: set[tuple[str, str]] = {
    ("POST", "/api/v1/jobs"),
}


def _apply_contract_response_codes(schema: dict) -> None:
    """Limit documented response codes to the ones the handlers can return."""
    for path, methods in _OPENAPI_RESPONSE_CODES.items():
        path_item = schema.get("paths", {}).get(path)
        if not path_item:
            continue

        for method, allowed_codes in methods.items():
            operation = path_item.get(method)
            if not operation:
                continue

            responses = operation.setdefault("responses", {})
            for status_code in list(responses.keys()):
                if status_code not in allowed_codes:
                    responses.pop(status_code, None)

            for status_code in sorted(allowed_codes):
                responses.setdefault(status_code, {"description": "See API contract"})


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    if not settings.worker_enabled:
        logger.info("worker.disabled")
        yield
        return

    worker = build_worker(app.state.store, settings)
    stop_event = threading.Event()
    thread = threading.Thread(
        target=worker.run_forever,
        args=(stop_event,),
        name="transcription-worker",
        daemon=True,
    )
    thread.start()
    app.state.worker_thread = thread
    try:
        yield
    finally:
        stop_event.set()
        # A stage stuck in a collaborator call cannot be interrupted; the daemon thread dies with the process.
        thread.join(timeout=_WORKER_JOIN_TIMEOUT_SECONDS)


def create_app() -> FastAPI:
    app = FastAPI(title="ytscribe API", version="1.0.0", lifespan=_lifespan)
    app.state.store = JobStore()

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        route = request.scope.get("route")
        route_path = getattr(route, "path", request.url.path)
        route_key = (request.method.upper(), route_path)
        if route_key in _SUBMIT_VALIDATION_PATHS:
            payload = ErrorResponse(code="VALIDATION_ERROR", message="A non-empty source_ref is required.")
            return JSONResponse(status_code=422, content=payload.model_dump(exclude_none=True))

        return await request_validation_exception_handler(request, exc)

    app.include_router(jobs_router, prefix="/api/v1")

    def custom_openapi() -> dict:
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        _apply_contract_response_codes(schema)
        app.openapi_schema = schema
        return app.openapi_schema

    app.openapi = custom_openapi

    return app


app = create_app()
