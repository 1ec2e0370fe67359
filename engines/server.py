"""Aggregate app for the annotation engine."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from engines.annotations.routes import router as annotations_router
from engines.common.error_envelope import build_error_envelope
from engines.common.health import router as health_router

logger = logging.getLogger(__name__)


async def _generic_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s", request.url.path)
    envelope = build_error_envelope(
        code="internal.error",
        message="Internal server error",
        status_code=500,
        details={"path": request.url.path},
    )
    return JSONResponse(content=envelope.model_dump(), status_code=500)


def register_error_handlers(target_app: FastAPI) -> None:
    target_app.add_exception_handler(Exception, _generic_exception_handler)


def create_app() -> FastAPI:
    app = FastAPI(title="Timeline Annotation Engine")
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(annotations_router)
    return app


app = create_app()
