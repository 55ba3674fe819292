from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .repository import CourseRepository


class MySQLCourseRepository(CourseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def course_exists(self, course_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS ok FROM courses WHERE course_id=%s", (course_id,))
            return fetchone(cur) is not None

    def get_roster(self, course_id: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id
                FROM course_enrollments
                WHERE course_id=%s
                ORDER BY enrolled_at, student_id
                """,
                (course_id,),
            )
            return tuple(str(r["student_id"]) for r in fetchall(cur))
