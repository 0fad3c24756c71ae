from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional


class TaskApiError(Exception):
    """
    Base exception for failures surfaced through the task API.

    Every error carries a stable code, a human readable message and the HTTP
    status the API boundary answers with.
    """

    code: str = "InternalError"
    http_status: int = 500

    def __init__(self, message: str, detail: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_response(self) -> Dict[str, Any]:
        """Convert to the JSON error envelope returned by the API."""
        body: Dict[str, Any] = {"error": self.code, "message": self.message}
        if self.detail is not None:
            body["detail"] = self.detail
        return body


# PUBLIC_INTERFACE
class InvalidInputError(TaskApiError):
    """Input failed schema validation; nothing was persisted."""

    code = "InvalidInput"
    http_status = 400

    def __init__(
        self,
        issues: Optional[List[Dict[str, Any]]] = None,
        message: str = "Request validation failed",
    ) -> None:
        super().__init__(message, detail=list(issues or []))
        self.issues = list(issues or [])

    @classmethod
    def from_errors(cls, errors: Iterable[Dict[str, Any]]) -> "InvalidInputError":
        """
        Build from pydantic/FastAPI error dicts, keeping only the JSON-safe
        location, message and type of each issue.
        """
        issues = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
            for e in errors
        ]
        return cls(issues)


# PUBLIC_INTERFACE
class TaskNotFoundError(TaskApiError):
    """Referenced task id does not exist."""

    code = "NotFound"
    http_status = 404

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task with id {task_id} not found", detail={"id": task_id})
        self.task_id = task_id


# PUBLIC_INTERFACE
class StoreFailureError(TaskApiError):
    """The persistence layer failed for infrastructural reasons."""

    code = "StoreFailure"
    http_status = 500

    def __init__(self, operation: str, message: str = "Task store operation failed") -> None:
        super().__init__(message)
        self.operation = operation
