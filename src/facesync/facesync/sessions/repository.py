from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceSession


class SessionRepository(Protocol):
    def create_session(
        self,
        *,
        course_id: str,
        student_ids: Sequence[str],
        created_at: datetime,
    ) -> Optional[AttendanceSession]:
        """Close the course's OPEN session (if any) and insert a new OPEN one, atomically.

        Returns None when a concurrent open won the race for the course.
        """

        raise NotImplementedError

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def get_open_for_course(self, course_id: str) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def list_for_course(self, course_id: str, *, limit: int = 20) -> Sequence[AttendanceSession]:
        """Newest first."""

        raise NotImplementedError

    def save_statuses(self, session: AttendanceSession, *, expected_version: int) -> Optional[AttendanceSession]:
        """Write-if-unchanged: persist ``session.statuses`` only if the stored version
        still equals ``expected_version``. Returns the stored snapshot, or None on conflict.
        """

        raise NotImplementedError

    def close(self, session_id: int, *, closed_at: datetime) -> Optional[AttendanceSession]:
        """Mark an OPEN session CLOSED. Returns None if it was not OPEN."""

        raise NotImplementedError
