"""Generation endpoints."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from starlette.concurrency import run_in_threadpool

from parodygen.api.dependencies import get_pipeline_manager
from parodygen.models.segment import GenerateRequest, ValidationResult
from parodygen.pipeline.manager import PipelineManager
from parodygen.segments.validators import validate_segments

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generate"])


@router.post("/generate")
async def generate(
    request: GenerateRequest,
    manager: PipelineManager = Depends(get_pipeline_manager),
):
    """Download, cut and merge the requested segments into one audio file."""
    result = await run_in_threadpool(manager.generate, request.segments, request.project_name)
    logger.info("Sending %s as %s", result.output_path, result.filename)
    return FileResponse(
        path=result.output_path,
        media_type=manager.settings.audio_media_type,
        filename=result.filename,
        headers={"X-Run-Id": result.run_id},
    )


@router.post("/validate", response_model=ValidationResult)
async def validate(
    request: GenerateRequest,
    manager: PipelineManager = Depends(get_pipeline_manager),
) -> ValidationResult:
    """Check a segment list against the server-side rules without running anything."""
    return validate_segments(request.segments, manager.settings)
