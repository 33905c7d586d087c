from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ProjectStatus, ProjectType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Project
from .repository import ProjectRepository

_COLUMNS = (
    "p.project_id, p.project_code, p.project_name, p.pm_email, p.status, p.project_type, "
    "p.start_date, p.end_date, p.description"
)


def _to_project(row: dict) -> Project:
    return Project(
        project_id=int(row["project_id"]),
        project_code=row["project_code"],
        project_name=row["project_name"],
        pm_email=row["pm_email"],
        status=ProjectStatus(row["status"]),
        project_type=ProjectType(row["project_type"]),
        start_date=row["start_date"],
        end_date=row.get("end_date"),
        description=row.get("description"),
    )


class MySQLProjectRepository(ProjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, project_id: int) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM projects p WHERE p.project_id=%s", (project_id,))
            row = fetchone(cur)
            return _to_project(row) if row else None

    def get_by_code(self, project_code: str) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM projects p WHERE p.project_code=%s", (project_code,))
            row = fetchone(cur)
            return _to_project(row) if row else None

    def list_all(self) -> Sequence[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM projects p ORDER BY p.project_id ASC")
            return [_to_project(r) for r in fetchall(cur)]

    def list_by_pm_email(self, pm_email: str) -> Sequence[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM projects p WHERE p.pm_email=%s ORDER BY p.project_id ASC",
                (pm_email,),
            )
            return [_to_project(r) for r in fetchall(cur)]

    def list_by_active_member(self, user_id: int) -> Sequence[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT DISTINCT {_COLUMNS}
                FROM projects p
                JOIN project_members m ON m.project_id = p.project_id
                WHERE m.user_id=%s AND m.is_active=1 AND m.left_date IS NULL
                ORDER BY p.project_id ASC
                """,
                (user_id,),
            )
            return [_to_project(r) for r in fetchall(cur)]

    def create_project(
        self,
        *,
        project_code: str,
        project_name: str,
        pm_email: str,
        status: ProjectStatus,
        project_type: ProjectType,
        start_date: date,
        end_date: Optional[date],
        description: Optional[str],
        created_by: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO projects(project_code, project_name, pm_email, status, project_type,
                                     start_date, end_date, description, created_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    project_code,
                    project_name,
                    pm_email,
                    status.value,
                    project_type.value,
                    start_date,
                    end_date,
                    description,
                    created_by,
                ),
            )
            return int(cur.lastrowid)

    def update_status(self, project_id: int, *, status: ProjectStatus, end_date: Optional[date]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE projects SET status=%s, end_date=%s WHERE project_id=%s",
                (status.value, end_date, project_id),
            )
            return cur.rowcount > 0

    def update_project(
        self,
        project_id: int,
        *,
        project_code: str,
        project_name: str,
        pm_email: str,
        project_type: ProjectType,
        start_date: date,
        end_date: Optional[date],
        description: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE projects
                SET project_code=%s, project_name=%s, pm_email=%s, project_type=%s,
                    start_date=%s, end_date=%s, description=%s
                WHERE project_id=%s
                """,
                (
                    project_code,
                    project_name,
                    pm_email,
                    project_type.value,
                    start_date,
                    end_date,
                    description,
                    project_id,
                ),
            )
            return cur.rowcount > 0
