"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from contentextract.api.routes import router
from contentextract.config import ServiceConfig
from contentextract.errors import ContentExtractError, InvalidInputError
from contentextract.services.pipeline import ExtractionService

logger = logging.getLogger(__name__)


async def _handle_pipeline_error(request: Request, exc: ContentExtractError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Extraction failed for %s: %s", request.url.path, exc, exc_info=exc)
    else:
        logger.info("Rejected request to %s: %s", request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Malformed body for %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": InvalidInputError.public_message})


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error while serving %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": ContentExtractError.public_message})


def create_app(
    config: ServiceConfig | None = None,
    *,
    service: ExtractionService | None = None,
) -> FastAPI:
    config = config or ServiceConfig.from_env()

    app = FastAPI(title="Content Extract", description="Summaries and key points for any web page")
    app.state.config = config
    app.state.extraction_service = service or ExtractionService(config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if config.allows_any_origin else config.allowed_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ContentExtractError, _handle_pipeline_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)

    app.include_router(router, prefix="/api")

    @app.get("/", response_class=PlainTextResponse)
    async def index() -> str:
        return "Server is up"

    return app
