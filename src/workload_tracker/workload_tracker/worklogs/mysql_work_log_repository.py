from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import WorkLogEntry, WorkLogSummary
from .repository import WorkLogRepository

_COLUMNS = (
    "w.work_log_id, w.user_id, w.project_id, w.work_date, w.hours_worked, "
    "w.task_feature, w.work_description, w.created_at"
)


def _to_entry(row: dict) -> WorkLogEntry:
    return WorkLogEntry(
        entry_id=int(row["work_log_id"]),
        user_id=int(row["user_id"]),
        project_id=int(row["project_id"]),
        work_date=row["work_date"],
        hours_worked=as_decimal(row["hours_worked"]),
        task_feature=row["task_feature"],
        description=row.get("work_description"),
        created_at=row.get("created_at"),
    )


class MySQLWorkLogRepository(WorkLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[WorkLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM work_logs w WHERE w.work_log_id=%s", (entry_id,))
            row = fetchone(cur)
            return _to_entry(row) if row else None

    def find_for_day(self, *, user_id: int, project_id: int, work_date: date) -> Optional[WorkLogEntry]:
        # Locking read: the duplicate check and the insert share one transaction.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM work_logs w
                WHERE w.user_id=%s AND w.project_id=%s AND w.work_date=%s
                FOR UPDATE
                """,
                (user_id, project_id, work_date),
            )
            row = fetchone(cur)
            return _to_entry(row) if row else None

    def create_entry(
        self,
        *,
        user_id: int,
        project_id: int,
        work_date: date,
        hours_worked: Decimal,
        task_feature: str,
        description: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_logs(user_id, project_id, work_date, hours_worked, task_feature, work_description)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (user_id, project_id, work_date, hours_worked, task_feature, description),
            )
            return int(cur.lastrowid)

    def update_entry(
        self,
        entry_id: int,
        *,
        work_date: date,
        hours_worked: Decimal,
        task_feature: str,
        description: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE work_logs
                SET work_date=%s, hours_worked=%s, task_feature=%s, work_description=%s
                WHERE work_log_id=%s
                """,
                (work_date, hours_worked, task_feature, description, entry_id),
            )
            return cur.rowcount > 0

    def delete_entry(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM work_logs WHERE work_log_id=%s", (entry_id,))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[WorkLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM work_logs w ORDER BY w.work_date DESC, w.work_log_id DESC")
            return [_to_entry(r) for r in fetchall(cur)]

    def list_by_user(self, user_id: int) -> Sequence[WorkLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM work_logs w WHERE w.user_id=%s ORDER BY w.work_date DESC, w.work_log_id DESC",
                (user_id,),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_by_project(self, project_id: int) -> Sequence[WorkLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM work_logs w WHERE w.project_id=%s ORDER BY w.work_date DESC, w.work_log_id DESC",
                (project_id,),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_by_pm_email(self, pm_email: str) -> Sequence[WorkLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM work_logs w
                JOIN projects p ON p.project_id = w.project_id
                WHERE p.pm_email=%s
                ORDER BY w.work_date DESC, w.work_log_id DESC
                """,
                (pm_email,),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def count_by_project(self, project_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS cnt FROM work_logs WHERE project_id=%s", (project_id,))
            row = fetchone(cur)
            return int(row["cnt"]) if row else 0

    def summarize_by_project(self, project_id: int) -> Sequence[WorkLogSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DATE_FORMAT(work_date, '%%Y-%%m') AS period,
                       COUNT(*) AS entry_count,
                       SUM(hours_worked) AS total_hours,
                       COUNT(DISTINCT user_id) AS contributor_count
                FROM work_logs
                WHERE project_id=%s
                GROUP BY period
                ORDER BY period ASC
                """,
                (project_id,),
            )
            return [
                WorkLogSummary(
                    period=r["period"],
                    entry_count=int(r["entry_count"]),
                    total_hours=as_decimal(r["total_hours"]),
                    contributor_count=int(r["contributor_count"]),
                )
                for r in fetchall(cur)
            ]
