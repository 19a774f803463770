"""Status endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from parodygen.api.dependencies import get_pipeline_manager
from parodygen.models.errors import PrereqError, ValidationError
from parodygen.pipeline.manager import PipelineManager

router = APIRouter(prefix="/api", tags=["status"])


@router.get("/status")
async def get_status(manager: PipelineManager = Depends(get_pipeline_manager)):
    """Report whether the media tools are reachable."""
    try:
        await run_in_threadpool(manager.check_prerequisites)
    except PrereqError as e:
        return JSONResponse(
            status_code=503,
            content={"status": "error", "tools": "not running", "message": e.message},
        )
    return {"status": "ok", "tools": "running", "message": "All systems operational"}


@router.get("/runs/{run_id}")
async def get_run(run_id: str, manager: PipelineManager = Depends(get_pipeline_manager)):
    """Get the state of a generation run."""
    state = manager.get_run_state(run_id)
    if not state:
        raise ValidationError(f"Run {run_id} not found")
    return state.model_dump(mode="json")
