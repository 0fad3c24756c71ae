from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, Request

from .. import handlers
from ..errors import InvalidInputError, StoreFailureError, TaskNotFoundError
from ..repositories import Repository
from ..schemas import (
    CreateTaskInput,
    DeleteTaskInput,
    DeleteTaskResult,
    HealthStatus,
    TaskOut,
    UpdateTaskInput,
)

router = APIRouter(
    prefix="/rpc",
    tags=["tasks"],
)

_INVALID = {400: {"description": f"{InvalidInputError.code}: input failed validation"}}
_NOT_FOUND = {404: {"description": f"{TaskNotFoundError.code}: no task with the given id"}}
_STORE = {500: {"description": f"{StoreFailureError.code}: the task store failed"}}


# PUBLIC_INTERFACE
def get_repository(request: Request) -> Repository:
    """
    Dependency returning the repository built during application startup.
    """
    return request.app.state.repository


# PUBLIC_INTERFACE
@router.get(
    "/healthcheck",
    response_model=HealthStatus,
    summary="Health Check",
    description="Liveness probe. Does not touch the task store.",
    tags=["health"],
)
def healthcheck() -> HealthStatus:
    """
    Health check procedure.
    """
    return HealthStatus(status="ok", timestamp=datetime.now(timezone.utc).isoformat())


# PUBLIC_INTERFACE
@router.post(
    "/createTask",
    response_model=TaskOut,
    summary="Create Task",
    description="Create a new task (completed=false) and return the stored record.",
    responses={**_INVALID, **_STORE},
)
def create_task(payload: CreateTaskInput, repo: Repository = Depends(get_repository)) -> TaskOut:
    """
    Create a new task.
    """
    return handlers.create_task(repo, payload)


# PUBLIC_INTERFACE
@router.get(
    "/getTasks",
    response_model=List[TaskOut],
    summary="List Tasks",
    description="Return every task ordered newest first by created_at.",
    responses={**_STORE},
)
def get_tasks(repo: Repository = Depends(get_repository)) -> List[TaskOut]:
    """
    List all tasks.
    """
    return handlers.get_tasks(repo)


# PUBLIC_INTERFACE
@router.post(
    "/updateTask",
    response_model=TaskOut,
    summary="Update Task",
    description="Set the completion status of an existing task.",
    responses={**_INVALID, **_NOT_FOUND, **_STORE},
)
def update_task(payload: UpdateTaskInput, repo: Repository = Depends(get_repository)) -> TaskOut:
    """
    Update a task's completion flag. Fails with 404 if the id does not exist.
    """
    return handlers.update_task(repo, payload)


# PUBLIC_INTERFACE
@router.post(
    "/deleteTask",
    response_model=DeleteTaskResult,
    summary="Delete Task",
    description="Delete a task by id. Returns success=false when no such task exists.",
    responses={**_INVALID, **_STORE},
)
def delete_task(payload: DeleteTaskInput, repo: Repository = Depends(get_repository)) -> DeleteTaskResult:
    """
    Delete a task. Never fails for an absent id.
    """
    return handlers.delete_task(repo, payload)
