from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import AttendanceStatus, SessionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceSession, StudentStatus
from .repository import SessionRepository

logger = logging.getLogger(__name__)

_SESSION_COLUMNS = "session_id, course_id, status, created_at, closed_at, version"

# Server rolled the transaction back; the open can simply be retried.
_RETRYABLE_ERRNOS = (errorcode.ER_LOCK_DEADLOCK, errorcode.ER_LOCK_WAIT_TIMEOUT)


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load_students(self, cur, session_ids: List[int]) -> Dict[int, List[StudentStatus]]:
        out: Dict[int, List[StudentStatus]] = {sid: [] for sid in session_ids}
        if not session_ids:
            return out
        placeholders = ",".join(["%s"] * len(session_ids))
        cur.execute(
            f"""
            SELECT session_id, student_id, status
            FROM attendance_session_students
            WHERE session_id IN ({placeholders})
            ORDER BY session_id, position
            """,
            tuple(session_ids),
        )
        for r in fetchall(cur):
            out[int(r["session_id"])].append(
                StudentStatus(student_id=str(r["student_id"]), status=AttendanceStatus(r["status"]))
            )
        return out

    def _to_sessions(self, cur, rows: List[Dict[str, Any]]) -> List[AttendanceSession]:
        students = self._load_students(cur, [int(r["session_id"]) for r in rows])
        return [
            AttendanceSession(
                session_id=int(r["session_id"]),
                course_id=str(r["course_id"]),
                created_at=r["created_at"],
                statuses=tuple(students[int(r["session_id"])]),
                status=SessionStatus(r["status"]),
                version=int(r["version"]),
                closed_at=r.get("closed_at"),
            )
            for r in rows
        ]

    def create_session(
        self,
        *,
        course_id: str,
        student_ids: Sequence[str],
        created_at: datetime,
    ) -> Optional[AttendanceSession]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                # Serializes opens of the same course on the course row.
                cur.execute("SELECT course_id FROM courses WHERE course_id=%s FOR UPDATE", (course_id,))
                fetchone(cur)
                cur.execute(
                    """
                    UPDATE attendance_sessions
                    SET status=%s, closed_at=%s, version=version+1
                    WHERE course_id=%s AND status=%s
                    """,
                    (SessionStatus.CLOSED.value, created_at, course_id, SessionStatus.OPEN.value),
                )
                cur.execute(
                    """
                    INSERT INTO attendance_sessions(course_id, status, created_at, version)
                    VALUES(%s,%s,%s,0)
                    """,
                    (course_id, SessionStatus.OPEN.value, created_at),
                )
                session_id = int(cur.lastrowid)
                if student_ids:
                    cur.executemany(
                        """
                        INSERT INTO attendance_session_students(session_id, student_id, position, status)
                        VALUES(%s,%s,%s,%s)
                        """,
                        [
                            (session_id, sid, position, AttendanceStatus.ABSENT.value)
                            for position, sid in enumerate(student_ids)
                        ],
                    )
        except mysql.connector.IntegrityError as exc:
            # uq_attendance_sessions_open: another open for this course committed first
            logger.warning("Concurrent open for course %s rejected: %s", course_id, exc)
            return None
        except mysql.connector.Error as exc:
            if exc.errno not in _RETRYABLE_ERRNOS:
                raise
            logger.warning("Open for course %s rolled back by the server: %s", course_id, exc)
            return None
        return self.get_by_id(session_id)

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SESSION_COLUMNS} FROM attendance_sessions WHERE session_id=%s",
                (int(session_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return self._to_sessions(cur, [r])[0]

    def get_open_for_course(self, course_id: str) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SESSION_COLUMNS} FROM attendance_sessions WHERE open_course_id=%s",
                (course_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return self._to_sessions(cur, [r])[0]

    def list_for_course(self, course_id: str, *, limit: int = 20) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SESSION_COLUMNS}
                FROM attendance_sessions
                WHERE course_id=%s
                ORDER BY created_at DESC, session_id DESC
                LIMIT %s
                """,
                (course_id, int(limit)),
            )
            return self._to_sessions(cur, fetchall(cur))

    def save_statuses(self, session: AttendanceSession, *, expected_version: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET version=version+1
                WHERE session_id=%s AND version=%s
                """,
                (session.session_id, int(expected_version)),
            )
            if cur.rowcount == 0:
                return None
            cur.executemany(
                """
                UPDATE attendance_session_students
                SET status=%s
                WHERE session_id=%s AND student_id=%s
                """,
                [(s.status.value, session.session_id, s.student_id) for s in session.statuses],
            )
        return self.get_by_id(session.session_id)

    def close(self, session_id: int, *, closed_at: datetime) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET status=%s, closed_at=%s, version=version+1
                WHERE session_id=%s AND status=%s
                """,
                (SessionStatus.CLOSED.value, closed_at, int(session_id), SessionStatus.OPEN.value),
            )
            if cur.rowcount == 0:
                return None
        return self.get_by_id(session_id)
