from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr


# PUBLIC_INTERFACE
class CreateTaskInput(BaseModel):
    """
    Input for the createTask procedure.
    """

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"example": {"name": "Buy groceries"}},
    )

    name: StrictStr = Field(..., description="Task name", min_length=1)


# PUBLIC_INTERFACE
class UpdateTaskInput(BaseModel):
    """
    Input for the updateTask procedure. Only the completion flag is mutable.
    """

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"example": {"id": 1, "completed": True}},
    )

    id: StrictInt = Field(..., description="Identifier of the task to update")
    completed: StrictBool = Field(..., description="New completion status")


# PUBLIC_INTERFACE
class DeleteTaskInput(BaseModel):
    """
    Input for the deleteTask procedure.
    """

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"example": {"id": 1}},
    )

    id: StrictInt = Field(..., description="Identifier of the task to delete")


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Buy groceries",
                "completed": False,
                "created_at": "2025-01-25T10:15:30.123000Z",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the task")
    name: str = Field(..., description="Task name")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")


# PUBLIC_INTERFACE
class DeleteTaskResult(BaseModel):
    """
    Outcome of deleteTask. success is False when no task had the given id.
    """

    success: bool = Field(..., description="Whether a task was actually removed")


# PUBLIC_INTERFACE
class HealthStatus(BaseModel):
    """Liveness payload."""

    status: Literal["ok"] = "ok"
    timestamp: str = Field(..., description="Server time as an ISO8601 string")
