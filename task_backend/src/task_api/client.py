from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Dict, List, Optional, Set

import httpx

from .errors import InvalidInputError, StoreFailureError, TaskApiError, TaskNotFoundError
from .schemas import DeleteTaskResult, HealthStatus, TaskOut

logger = logging.getLogger(__name__)


def _raise_for_envelope(response: httpx.Response) -> None:
    """Map an error envelope from the API back onto the TaskApiError hierarchy."""
    if response.status_code < 400:
        return
    try:
        body: Dict[str, Any] = response.json()
    except ValueError:
        body = {}
    code = body.get("error")
    message = body.get("message") or response.reason_phrase
    detail = body.get("detail")

    if code == InvalidInputError.code:
        raise InvalidInputError(detail or [], message=message)
    if code == TaskNotFoundError.code and isinstance(detail, dict) and "id" in detail:
        raise TaskNotFoundError(detail["id"])
    if code == StoreFailureError.code:
        raise StoreFailureError("remote", message=message)
    # Anything else is a transport level HTTP failure.
    response.raise_for_status()


# PUBLIC_INTERFACE
class TaskClient:
    """
    Typed client for the task procedures.

    Accepts any httpx.Client, including FastAPI's TestClient, so the same
    client code runs against a live server or an in-process app.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:2022",
        *,
        http: Optional[httpx.Client] = None,
        prefix: str = "/rpc",
    ) -> None:
        self._http = http if http is not None else httpx.Client(base_url=base_url)
        self._owns_http = http is None
        self._prefix = prefix.rstrip("/")

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "TaskClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _query(self, procedure: str) -> Any:
        response = self._http.get(f"{self._prefix}/{procedure}")
        _raise_for_envelope(response)
        return response.json()

    def _mutate(self, procedure: str, payload: Dict[str, Any]) -> Any:
        response = self._http.post(f"{self._prefix}/{procedure}", json=payload)
        _raise_for_envelope(response)
        return response.json()

    def healthcheck(self) -> HealthStatus:
        return HealthStatus.model_validate(self._query("healthcheck"))

    def create_task(self, name: str) -> TaskOut:
        return TaskOut.model_validate(self._mutate("createTask", {"name": name}))

    def get_tasks(self) -> List[TaskOut]:
        return [TaskOut.model_validate(t) for t in self._query("getTasks")]

    def update_task(self, task_id: int, completed: bool) -> TaskOut:
        return TaskOut.model_validate(
            self._mutate("updateTask", {"id": task_id, "completed": completed})
        )

    def delete_task(self, task_id: int) -> DeleteTaskResult:
        return DeleteTaskResult.model_validate(self._mutate("deleteTask", {"id": task_id}))


# PUBLIC_INTERFACE
class TaskBoard:
    """
    Client-side view of the task list.

    The local cache is only changed after the server confirms a mutation.
    Failed calls are logged and leave the cache as it was. Toggle and delete
    requests for an id that already has one in flight are skipped.
    """

    def __init__(self, client: TaskClient) -> None:
        self._client = client
        self._lock = Lock()
        self.tasks: List[TaskOut] = []
        self.updating: Set[int] = set()
        self.deleting: Set[int] = set()
        self.is_loading = False
        self.is_submitting = False

    @property
    def completed(self) -> List[TaskOut]:
        return [t for t in self.tasks if t.completed]

    @property
    def pending(self) -> List[TaskOut]:
        return [t for t in self.tasks if not t.completed]

    def _find(self, task_id: int) -> Optional[TaskOut]:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None

    def load(self) -> bool:
        """Replace the cache with the server's list. Returns False on failure."""
        self.is_loading = True
        try:
            self.tasks = self._client.get_tasks()
            return True
        except (TaskApiError, httpx.HTTPError):
            logger.exception("Failed to load tasks")
            return False
        finally:
            self.is_loading = False

    def add(self, name: str) -> Optional[TaskOut]:
        """Create a task from user input; blank input is ignored."""
        name = name.strip()
        if not name:
            return None
        self.is_submitting = True
        try:
            created = self._client.create_task(name)
        except (TaskApiError, httpx.HTTPError):
            logger.exception("Failed to create task")
            return None
        finally:
            self.is_submitting = False
        # Newest first, matching getTasks ordering.
        self.tasks = [created, *self.tasks]
        return created

    def toggle(self, task_id: int) -> Optional[TaskOut]:
        """Flip the completion flag of a cached task."""
        current = self._find(task_id)
        if current is None:
            return None
        with self._lock:
            if task_id in self.updating:
                return None
            self.updating.add(task_id)
        try:
            updated = self._client.update_task(task_id, not current.completed)
        except (TaskApiError, httpx.HTTPError):
            logger.exception("Failed to update task id=%s", task_id)
            return None
        finally:
            with self._lock:
                self.updating.discard(task_id)
        self.tasks = [
            t.model_copy(update={"completed": updated.completed}) if t.id == task_id else t
            for t in self.tasks
        ]
        return updated

    def remove(self, task_id: int) -> bool:
        """
        Delete a task. The cache entry is dropped once the server answers,
        whether it removed the row or the row was already gone.
        """
        with self._lock:
            if task_id in self.deleting:
                return False
            self.deleting.add(task_id)
        try:
            result = self._client.delete_task(task_id)
        except (TaskApiError, httpx.HTTPError):
            logger.exception("Failed to delete task id=%s", task_id)
            return False
        finally:
            with self._lock:
                self.deleting.discard(task_id)
        self.tasks = [t for t in self.tasks if t.id != task_id]
        return result.success
