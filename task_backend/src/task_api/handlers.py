from __future__ import annotations

import logging
from typing import Any, List, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .errors import InvalidInputError, TaskApiError
from .repositories import Repository
from .schemas import (
    CreateTaskInput,
    DeleteTaskInput,
    DeleteTaskResult,
    TaskOut,
    UpdateTaskInput,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _validate(model: Type[M], payload: Union[M, Mapping[str, Any]]) -> M:
    """
    Return payload as an instance of model, validating plain mappings.
    Raises InvalidInputError before any store access when validation fails.
    """
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInputError.from_errors(exc.errors()) from exc


# PUBLIC_INTERFACE
def create_task(repo: Repository, payload: Union[CreateTaskInput, Mapping[str, Any]]) -> TaskOut:
    """
    Create a task with completed=False and return it as stored.

    Raises:
        InvalidInputError: name is missing or empty.
        StoreFailureError: the store could not persist the row.
    """
    data = _validate(CreateTaskInput, payload)
    try:
        created = repo.insert(data.name)
    except TaskApiError:
        logger.error("Task creation failed")
        raise
    logger.info("Created task id=%s", created["id"], extra={"task_id": created["id"]})
    return TaskOut(**created)


# PUBLIC_INTERFACE
def get_tasks(repo: Repository) -> List[TaskOut]:
    """Return all tasks, newest first."""
    try:
        items = repo.select_all()
    except TaskApiError:
        logger.error("Failed to fetch tasks")
        raise
    return [TaskOut(**it) for it in items]


# PUBLIC_INTERFACE
def update_task(repo: Repository, payload: Union[UpdateTaskInput, Mapping[str, Any]]) -> TaskOut:
    """
    Set the completion flag of an existing task.

    Raises:
        InvalidInputError: id or completed missing or of the wrong type.
        TaskNotFoundError: no task has the given id.
        StoreFailureError: the store failed.
    """
    data = _validate(UpdateTaskInput, payload)
    try:
        updated = repo.update_completed(data.id, data.completed)
    except TaskApiError as exc:
        logger.error("Task update failed: %s", exc.message, extra={"task_id": data.id})
        raise
    logger.info(
        "Updated task id=%s completed=%s", data.id, data.completed, extra={"task_id": data.id}
    )
    return TaskOut(**updated)


# PUBLIC_INTERFACE
def delete_task(repo: Repository, payload: Union[DeleteTaskInput, Mapping[str, Any]]) -> DeleteTaskResult:
    """
    Delete a task. A missing id is not an error: it yields success=False.
    """
    data = _validate(DeleteTaskInput, payload)
    try:
        removed = repo.delete_by_id(data.id)
    except TaskApiError:
        logger.error("Task deletion failed", extra={"task_id": data.id})
        raise
    logger.info("Delete task id=%s removed=%s", data.id, removed, extra={"task_id": data.id})
    return DeleteTaskResult(success=removed)
