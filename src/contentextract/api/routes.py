"""API routes exposing the extraction pipeline."""

from __future__ import annotations

from fastapi import APIRouter, Body, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from contentextract.models import ExtractionRequest, ExtractionResponse
from contentextract.services.pipeline import ExtractionService

router = APIRouter()


def get_service(request: Request) -> ExtractionService:
    return request.app.state.extraction_service


@router.get("/health", response_class=PlainTextResponse)
async def health() -> str:
    return "API is healthy"


@router.post("/extract", response_model=ExtractionResponse)
async def extract(
    request: Request,
    payload: ExtractionRequest | None = Body(default=None),
) -> ExtractionResponse:
    """Fetch the submitted URL, summarise it and return key points."""

    url = payload.url if payload is not None else None
    service = get_service(request)
    # Pipeline errors propagate to the handlers registered in ``create_app``.
    return await run_in_threadpool(service.run, url)
