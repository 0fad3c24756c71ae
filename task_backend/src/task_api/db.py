from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Generator, List

from .errors import StoreFailureError, TaskNotFoundError
from .models import TaskEntity
from .repositories import Repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "tasks"
    id: str = "id"
    name: str = "name"
    completed: str = "completed"
    created_at: str = "created_at"


_COLS = _Cols()

# UTC with millisecond precision, evaluated by SQLite at insert time.
_NOW_SQL = "(strftime('%Y-%m-%dT%H:%M:%f', 'now'))"

# SQLite INTEGER is signed 64-bit; ids outside this range cannot exist in the table.
_MIN_ID = -(2**63)
_MAX_ID = 2**63 - 1


def _storable_id(task_id: int) -> bool:
    return _MIN_ID <= task_id <= _MAX_ID


class SQLiteRepository(Repository):
    """
    SQLite repository implementing the Repository interface.

    Each operation opens its own connection and runs in one transaction, so
    every insert/update/delete is atomic for the single row it touches.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()
        logger.info("SQLite task repository ready db=%s", db_path)

    @contextmanager
    def _conn(self, operation: str) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as e:
            logger.error("SQLite connect failed during %s: %s", operation, e)
            raise StoreFailureError(operation) from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error("SQLite error during %s: %s", operation, e)
            raise StoreFailureError(operation) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn("init") as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.name} TEXT NOT NULL,
                    {_COLS.completed} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.created_at} TEXT NOT NULL DEFAULT {_NOW_SQL}
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_created_at ON {_COLS.table}({_COLS.created_at})"
            )

    def _row_to_entity(self, row: sqlite3.Row) -> TaskEntity:
        created_at = datetime.fromisoformat(row[_COLS.created_at])
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return {
            "id": int(row[_COLS.id]),
            "name": str(row[_COLS.name]),
            "completed": bool(row[_COLS.completed]),
            "created_at": created_at,
        }

    def _fetch(self, conn: sqlite3.Connection, task_id: int) -> sqlite3.Row:
        row = conn.execute(
            f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (task_id,)
        ).fetchone()
        if row is None:
            raise TaskNotFoundError(task_id)
        return row

    def insert(self, name: str) -> TaskEntity:
        with self._conn("insert") as conn:
            cur = conn.execute(
                f"INSERT INTO {_COLS.table} ({_COLS.name}) VALUES (?)", (name,)
            )
            return self._row_to_entity(self._fetch(conn, cur.lastrowid))

    def select_all(self) -> List[TaskEntity]:
        with self._conn("select_all") as conn:
            rows = conn.execute(
                f"""
                SELECT * FROM {_COLS.table}
                ORDER BY {_COLS.created_at} DESC, {_COLS.id} DESC
                """
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def update_completed(self, task_id: int, completed: bool) -> TaskEntity:
        if not _storable_id(task_id):
            raise TaskNotFoundError(task_id)
        with self._conn("update_completed") as conn:
            cur = conn.execute(
                f"UPDATE {_COLS.table} SET {_COLS.completed} = ? WHERE {_COLS.id} = ?",
                (1 if completed else 0, task_id),
            )
            if cur.rowcount == 0:
                raise TaskNotFoundError(task_id)
            return self._row_to_entity(self._fetch(conn, task_id))

    def delete_by_id(self, task_id: int) -> bool:
        if not _storable_id(task_id):
            return False
        with self._conn("delete_by_id") as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (task_id,))
            return cur.rowcount > 0
