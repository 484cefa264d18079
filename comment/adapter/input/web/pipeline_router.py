import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.pipeline_factory import build_pipeline_usecase, collect_secrets
from comment.adapter.input.web.request.pipeline_requests import TriggerPipelineRequest
from comment.application.usecase.pipeline_usecase import PipelineUseCase
from comment.domain.exceptions import (
    ConfigMissingError,
    InvalidConfigError,
    InvalidInputError,
    PipelineError,
    mask_secrets,
)

logger = logging.getLogger(__name__)

pipeline_router = APIRouter(tags=["pipeline"])

FAILURE_MESSAGE = "Instagram comment scraping failed. No analysis performed."


def get_pipeline_usecase() -> PipelineUseCase:
    """Built per request so credentials exported after startup are picked up."""
    return build_pipeline_usecase()


def _status_for(exc: PipelineError) -> int:
    if isinstance(exc, (ConfigMissingError, InvalidConfigError)):
        return 503
    if isinstance(exc, InvalidInputError):
        return 400
    return 502


def _error_response(exc: PipelineError) -> JSONResponse:
    error = mask_secrets(str(exc), collect_secrets())
    logger.error("Pipeline error: %s", error)
    return JSONResponse(
        {"error": error, "type": exc.error_type, "message": FAILURE_MESSAGE},
        status_code=_status_for(exc),
    )


@pipeline_router.post("/run")
def trigger_pipeline(request: TriggerPipelineRequest):
    """
    Scrapes the comments of one post, analyzes each and stores the results.
    - blocks until the run finishes; the scrape poll is capped at roughly two minutes.
    """
    try:
        with get_pipeline_usecase() as usecase:
            result = usecase.run(request.post_url, request.max_items)
    except PipelineError as exc:
        return _error_response(exc)
    return JSONResponse({"success": True, **result.to_dict()})
