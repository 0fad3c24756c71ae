from datetime import datetime
from typing import List

from src.task_api.errors import StoreFailureError
from src.task_api.models import TaskEntity
from src.task_api.repositories import InMemoryRepository, Repository


def parse_ts(value: str) -> datetime:
    # Pydantic serializes UTC datetimes with a trailing 'Z'
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class RecordingRepository(InMemoryRepository):
    """In-memory repository that records which store operations ran."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: List[str] = []

    def insert(self, name: str) -> TaskEntity:
        self.calls.append("insert")
        return super().insert(name)

    def select_all(self) -> List[TaskEntity]:
        self.calls.append("select_all")
        return super().select_all()

    def update_completed(self, task_id: int, completed: bool) -> TaskEntity:
        self.calls.append("update_completed")
        return super().update_completed(task_id, completed)

    def delete_by_id(self, task_id: int) -> bool:
        self.calls.append("delete_by_id")
        return super().delete_by_id(task_id)


class BrokenRepository(Repository):
    """Repository whose every operation fails like a lost database connection."""

    def insert(self, name: str) -> TaskEntity:
        raise StoreFailureError("insert")

    def select_all(self) -> List[TaskEntity]:
        raise StoreFailureError("select_all")

    def update_completed(self, task_id: int, completed: bool) -> TaskEntity:
        raise StoreFailureError("update_completed")

    def delete_by_id(self, task_id: int) -> bool:
        raise StoreFailureError("delete_by_id")
