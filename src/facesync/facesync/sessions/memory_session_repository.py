from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import SessionStatus
from .model import AttendanceSession, StudentStatus
from .repository import SessionRepository


class InMemorySessionRepository(SessionRepository):
    def __init__(self):
        self._sessions: dict[int, AttendanceSession] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def _open_for(self, course_id: str) -> Optional[AttendanceSession]:
        for s in self._sessions.values():
            if s.course_id == course_id and s.is_open:
                return s
        return None

    def create_session(
        self,
        *,
        course_id: str,
        student_ids: Sequence[str],
        created_at: datetime,
    ) -> Optional[AttendanceSession]:
        with self._lock:
            previous = self._open_for(course_id)
            if previous:
                self._sessions[previous.session_id] = replace(
                    previous,
                    status=SessionStatus.CLOSED,
                    closed_at=created_at,
                    version=previous.version + 1,
                )

            session = AttendanceSession(
                session_id=self._next_id,
                course_id=course_id,
                created_at=created_at,
                statuses=tuple(StudentStatus(student_id=sid) for sid in student_ids),
            )
            self._sessions[session.session_id] = session
            self._next_id += 1
            return session

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        return self._sessions.get(int(session_id))

    def get_open_for_course(self, course_id: str) -> Optional[AttendanceSession]:
        with self._lock:
            return self._open_for(course_id)

    def list_for_course(self, course_id: str, *, limit: int = 20) -> Sequence[AttendanceSession]:
        with self._lock:
            items = [s for s in self._sessions.values() if s.course_id == course_id]
        items.sort(key=lambda s: (s.created_at, s.session_id), reverse=True)
        return items[:limit]

    def save_statuses(self, session: AttendanceSession, *, expected_version: int) -> Optional[AttendanceSession]:
        with self._lock:
            current = self._sessions.get(session.session_id)
            if current is None or current.version != expected_version:
                return None
            saved = replace(current, statuses=session.statuses, version=current.version + 1)
            self._sessions[saved.session_id] = saved
            return saved

    def close(self, session_id: int, *, closed_at: datetime) -> Optional[AttendanceSession]:
        with self._lock:
            current = self._sessions.get(int(session_id))
            if current is None or not current.is_open:
                return None
            closed = replace(current, status=SessionStatus.CLOSED, closed_at=closed_at, version=current.version + 1)
            self._sessions[closed.session_id] = closed
            return closed
