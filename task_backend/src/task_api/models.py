from __future__ import annotations

from datetime import datetime
from typing import TypedDict


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A lightweight domain model representing a persisted task row.

    Fields:
    - id: Unique integer identifier assigned by the store
    - name: Task name (at least one character)
    - completed: Boolean completion flag, False at creation
    - created_at: UTC insertion timestamp assigned by the store
    """

    id: int
    name: str
    completed: bool
    created_at: datetime
