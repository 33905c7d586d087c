from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import Membership
from .repository import MembershipRepository

_COLUMNS = "membership_id, project_id, user_id, workload_percentage, joined_date, left_date, is_active, created_by"
_CURRENT = "is_active=1 AND left_date IS NULL"


def _to_membership(row: dict) -> Membership:
    return Membership(
        membership_id=int(row["membership_id"]),
        project_id=int(row["project_id"]),
        user_id=int(row["user_id"]),
        workload_percentage=as_decimal(row["workload_percentage"]),
        joined_date=row["joined_date"],
        left_date=row.get("left_date"),
        is_active=bool(row.get("is_active", True)),
        created_by=row.get("created_by"),
    )


class MySQLMembershipRepository(MembershipRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_current(self, *, project_id: int, user_id: int) -> Optional[Membership]:
        # FOR UPDATE holds the row for the rest of an enclosing transaction.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM project_members
                WHERE project_id=%s AND user_id=%s AND {_CURRENT}
                ORDER BY membership_id DESC
                LIMIT 1
                FOR UPDATE
                """,
                (project_id, user_id),
            )
            row = fetchone(cur)
            return _to_membership(row) if row else None

    def get_latest(self, *, project_id: int, user_id: int) -> Optional[Membership]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM project_members
                WHERE project_id=%s AND user_id=%s
                ORDER BY membership_id DESC
                LIMIT 1
                """,
                (project_id, user_id),
            )
            row = fetchone(cur)
            return _to_membership(row) if row else None

    def list_for_project(self, project_id: int, *, active_only: bool = False) -> Sequence[Membership]:
        where = f"project_id=%s AND {_CURRENT}" if active_only else "project_id=%s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM project_members WHERE {where} ORDER BY membership_id ASC",
                (project_id,),
            )
            return [_to_membership(r) for r in fetchall(cur)]

    def list_for_user(self, user_id: int, *, active_only: bool = False) -> Sequence[Membership]:
        where = f"user_id=%s AND {_CURRENT}" if active_only else "user_id=%s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM project_members WHERE {where} ORDER BY membership_id ASC",
                (user_id,),
            )
            return [_to_membership(r) for r in fetchall(cur)]

    def create_membership(
        self,
        *,
        project_id: int,
        user_id: int,
        workload_percentage: Decimal,
        joined_date: date,
        created_by: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO project_members(project_id, user_id, workload_percentage, joined_date, is_active, created_by)
                VALUES(%s,%s,%s,%s,1,%s)
                """,
                (project_id, user_id, workload_percentage, joined_date, created_by),
            )
            return int(cur.lastrowid)

    def update_workload(self, membership_id: int, *, workload_percentage: Decimal) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE project_members SET workload_percentage=%s WHERE membership_id=%s",
                (workload_percentage, membership_id),
            )
            return cur.rowcount > 0

    def end_membership(self, membership_id: int, *, left_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE project_members SET is_active=0, left_date=%s WHERE membership_id=%s AND {_CURRENT}",
                (left_date, membership_id),
            )
            return cur.rowcount > 0

    def end_all_for_project(self, project_id: int, *, left_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE project_members SET is_active=0, left_date=%s WHERE project_id=%s AND {_CURRENT}",
                (left_date, project_id),
            )
            return int(cur.rowcount)

    def total_active_workload(self, user_id: int) -> Decimal:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT SUM(workload_percentage) AS total FROM project_members WHERE user_id=%s AND {_CURRENT}",
                (user_id,),
            )
            row = fetchone(cur)
            return as_decimal(row["total"] if row else None)

    def count_active_projects(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(DISTINCT project_id) AS cnt FROM project_members WHERE user_id=%s AND {_CURRENT}",
                (user_id,),
            )
            row = fetchone(cur)
            return int(row["cnt"]) if row else 0
