# =============================================================================
# app/routers/tasks.py - Task Status Endpoints
# =============================================================================
# Lets the admin panel follow background work (push broadcasts).
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel

from app.auth import AdminSession, get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter()


class TaskStatusResponse(BaseModel):
    """Response model for task status."""
    task_id: str
    status: str
    progress: int | None = None
    message: str | None = None
    result: dict | None = None
    error: str | None = None


@router.get("/{task_id}", response_model=TaskStatusResponse)
async def get_task_status(
    admin: Annotated[AdminSession, Depends(get_current_admin)],
    task_id: Annotated[str, Path(description="Celery task ID")],
):
    """
    Get the status of a background task.

    - PENDING: waiting in queue (unknown ids also report PENDING)
    - PROGRESS: running, with percent and message
    - SUCCESS: finished, with the delivery counts as result
    - FAILURE: failed, with the error
    """
    try:
        from workers.celery_app import celery_app

        result = celery_app.AsyncResult(task_id)

        response = TaskStatusResponse(
            task_id=task_id,
            status=result.status,
        )

        if result.status == "PROGRESS":
            info = result.info or {}
            response.progress = info.get("percent", 0)
            response.message = info.get("message", "Processing...")

        elif result.status == "SUCCESS":
            response.result = result.result
            response.progress = 100
            response.message = "Complete"

        elif result.status == "FAILURE":
            response.error = str(result.result) if result.result else "Unknown error"
            response.message = "Failed"

        elif result.status == "PENDING":
            response.progress = 0
            response.message = "Waiting in queue..."

        return response

    except Exception as e:
        logger.error(f"Error getting task status: {e}")
        raise HTTPException(status_code=503, detail=f"Failed to get task status. Is Redis running? Error: {e}")


class TaskSubmitResponse(BaseModel):
    """Response model for task submission."""
    task_id: str
    status: str
    message: str


@router.post("/healthcheck", response_model=TaskSubmitResponse)
async def submit_healthcheck(
    admin: Annotated[AdminSession, Depends(get_current_admin)],
):
    """
    Submit a no-op task to verify a worker is consuming the queue.

    Poll GET /tasks/{task_id}; SUCCESS means a worker is running.
    """
    try:
        from workers.celery_app import healthcheck

        result = healthcheck.delay()

        return TaskSubmitResponse(
            task_id=result.id,
            status="PENDING",
            message="Healthcheck submitted. Use GET /api/v1/tasks/{task_id} to check status.",
        )

    except Exception as e:
        logger.error(f"Error submitting healthcheck task: {e}")
        raise HTTPException(
            status_code=503,
            detail=f"Failed to submit task. Is Redis running? Error: {e}"
        )
