# tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from pathlib import Path

from .task_models import DuplicateTaskError, Task, TaskStoreError

logger = logging.getLogger(__name__)

TABLE_NAME = "todo_tasks"


class TaskStore:
    """
    SQLite task store backing the single `todo_tasks` table.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection, so calls may arrive
      from any worker thread
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except sqlite3.Error:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
                    name TEXT NOT NULL,
                    description TEXT NOT NULL,
                    isCompleted INTEGER NOT NULL DEFAULT 0,
                    isImportant INTEGER NOT NULL DEFAULT 0,
                    taskId INTEGER PRIMARY KEY NOT NULL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute(f"PRAGMA table_info({TABLE_NAME})")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE {TABLE_NAME} ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            # Early databases predate the flags.
            add_col("isCompleted", "INTEGER NOT NULL DEFAULT 0")
            add_col("isImportant", "INTEGER NOT NULL DEFAULT 0")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _is_primary_key_conflict(err: sqlite3.IntegrityError) -> bool:
        # taskId is a rowid alias: SQLite reports the clash as a UNIQUE failure on it.
        if getattr(err, "sqlite_errorname", None) == "SQLITE_CONSTRAINT_PRIMARYKEY":
            return True
        return f"UNIQUE constraint failed: {TABLE_NAME}.taskId" in str(err)

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            name=str(row["name"] or ""),
            description=str(row["description"] or ""),
            is_completed=bool(row["isCompleted"]),
            is_important=bool(row["isImportant"]),
            task_id=int(row["taskId"]),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(f"SELECT COUNT(*) FROM {TABLE_NAME}")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def list_tasks(self) -> list[Task]:
        """All tasks ordered by taskId (creation order for timestamp IDs)."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(f"SELECT * FROM {TABLE_NAME} ORDER BY taskId ASC")
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(f"SELECT * FROM {TABLE_NAME} WHERE taskId = ?", (int(task_id),))
            row = cur.fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def insert_task(self, task: Task) -> bool:
        """
        Insert a new row.

        Raises DuplicateTaskError when taskId is already taken; the existing
        row is left untouched.
        """
        conn = self._get_conn()
        try:
            try:
                conn.execute(
                    f"""
                    INSERT INTO {TABLE_NAME}(name, description, isCompleted, isImportant, taskId)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        task.name,
                        task.description,
                        int(task.is_completed),
                        int(task.is_important),
                        int(task.task_id),
                    ),
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                if self._is_primary_key_conflict(e):
                    raise DuplicateTaskError(task.task_id) from e
                raise TaskStoreError(f"Cannot insert task_id={task.task_id}: {e}") from e
            logger.debug("Task added task_id=%s", task.task_id)
            return True
        finally:
            conn.close()

    def update_task(self, task: Task) -> bool:
        """Replace the row keyed by taskId. Returns False if no such row."""
        conn = self._get_conn()
        try:
            cur = conn.execute(
                f"""
                UPDATE {TABLE_NAME}
                SET name = ?,
                    description = ?,
                    isCompleted = ?,
                    isImportant = ?
                WHERE taskId = ?
                """,
                (
                    task.name,
                    task.description,
                    int(task.is_completed),
                    int(task.is_important),
                    int(task.task_id),
                ),
            )
            conn.commit()
            changed = cur.rowcount == 1
            if not changed:
                logger.debug("update_task: no row for task_id=%s", task.task_id)
            return changed
        finally:
            conn.close()

    def delete_task(self, task_id: int) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute(f"DELETE FROM {TABLE_NAME} WHERE taskId = ?", (int(task_id),))
            conn.commit()
            changed = cur.rowcount == 1
            if not changed:
                logger.debug("delete_task: no row for task_id=%s", task_id)
            return changed
        finally:
            conn.close()
