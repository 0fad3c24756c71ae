from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from threading import RLock
from typing import List, Optional

from .errors import TaskNotFoundError
from .models import TaskEntity
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for task storage backends."""

    @abstractmethod
    def insert(self, name: str) -> TaskEntity:
        """Create a task with completed=False and return the persisted row."""

    @abstractmethod
    def select_all(self) -> List[TaskEntity]:
        """Return every task, newest first (created_at desc, then id desc)."""

    @abstractmethod
    def update_completed(self, task_id: int, completed: bool) -> TaskEntity:
        """
        Set the completion flag of a task and return the updated row.
        Raises TaskNotFoundError if no task has the given id.
        """

    @abstractmethod
    def delete_by_id(self, task_id: int) -> bool:
        """Delete a task by id. Return True if deleted, False if not found."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and ephemeral runs.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, TaskEntity] = {}
        self._next_id = 1

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def insert(self, name: str) -> TaskEntity:
        with self._lock:
            entity: TaskEntity = {
                "id": self._next_id,
                "name": name,
                "completed": False,
                "created_at": self._now(),
            }
            self._next_id += 1
            self._items[entity["id"]] = entity
            return entity.copy()

    def select_all(self) -> List[TaskEntity]:
        with self._lock:
            items = sorted(
                self._items.values(),
                key=lambda t: (t["created_at"], t["id"]),
                reverse=True,
            )
            # Return copies to avoid external mutation
            return [t.copy() for t in items]

    def update_completed(self, task_id: int, completed: bool) -> TaskEntity:
        with self._lock:
            existing = self._items.get(task_id)
            if existing is None:
                raise TaskNotFoundError(task_id)
            existing["completed"] = completed
            return existing.copy()

    def delete_by_id(self, task_id: int) -> bool:
        with self._lock:
            return self._items.pop(task_id, None) is not None


# PUBLIC_INTERFACE
def build_repository(settings: Optional[Settings] = None) -> Repository:
    """
    Factory to return the configured repository based on settings.
    - sqlite: SQLiteRepository at settings.sqlite_db_path
    - memory: InMemoryRepository
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "memory":
        logger.info("Using in-memory task repository")
        return InMemoryRepository()

    from .db import SQLiteRepository

    return SQLiteRepository(settings.sqlite_db_path)
