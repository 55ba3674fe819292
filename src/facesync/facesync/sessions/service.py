from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import (
    DEFAULT_SESSION_HISTORY_LIMIT,
    DEFAULT_SESSION_UPDATE_ATTEMPTS,
    MAX_SESSION_HISTORY_LIMIT,
)
from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, NotFoundError
from ..courses.repository import CourseRepository
from .locks import SessionLockRegistry
from .model import AttendanceSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)


class AttendanceSessionService:
    """Vòng đời buổi điểm danh và chuyển trạng thái Absent -> Present.

    Ghi trạng thái luôn chạy dưới khoá theo từng session (chờ có giới hạn) và
    ghi có kiểm tra version; xung đột được thử lại tối đa `max_attempts` lần
    rồi mới báo ConflictError.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        courses: CourseRepository,
        *,
        locks: Optional[SessionLockRegistry] = None,
        max_attempts: int = DEFAULT_SESSION_UPDATE_ATTEMPTS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._sessions = sessions
        self._courses = courses
        self._locks = locks or SessionLockRegistry()
        self._max_attempts = max(1, int(max_attempts))
        self._clock = clock

    def open_session(self, course_id: str) -> AttendanceSession:
        course_id = require_non_empty(course_id, "Mã môn học")
        if not self._courses.course_exists(course_id):
            raise NotFoundError("Môn học không tồn tại")

        # Roster snapshot: unique ids, roster order kept.
        roster = list(dict.fromkeys(str(s) for s in self._courses.get_roster(course_id)))

        for attempt in range(1, self._max_attempts + 1):
            session = self._sessions.create_session(course_id=course_id, student_ids=roster, created_at=self._clock())
            if session:
                logger.info(
                    "Opened session %s for course %s (%d students)", session.session_id, course_id, len(roster)
                )
                return session
            logger.warning("Open session for course %s collided (attempt %d/%d)", course_id, attempt, self._max_attempts)

        raise ConflictError("Không thể mở buổi điểm danh do xung đột, vui lòng thử lại")

    def get_active_session(self, course_id: str) -> AttendanceSession:
        course_id = require_non_empty(course_id, "Mã môn học")
        session = self._sessions.get_open_for_course(course_id)
        if not session:
            raise NotFoundError("Chưa có buổi điểm danh nào đang mở cho môn học này")
        return session

    def get_session(self, session_id: int) -> AttendanceSession:
        session_id = require_positive_int(session_id, "Mã buổi điểm danh")
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFoundError("Buổi điểm danh không tồn tại")
        return session

    def list_sessions(
        self, course_id: str, *, limit: int = DEFAULT_SESSION_HISTORY_LIMIT
    ) -> Sequence[AttendanceSession]:
        course_id = require_non_empty(course_id, "Mã môn học")
        limit = require_positive_int(limit, "Số buổi cần lấy", maximum=MAX_SESSION_HISTORY_LIMIT)
        return self._sessions.list_for_course(course_id, limit=limit)

    def mark_present(self, course_id: str, student_id: str) -> AttendanceSession:
        course_id = require_non_empty(course_id, "Mã môn học")
        student_id = require_non_empty(student_id, "Mã sinh viên")

        for attempt in range(1, self._max_attempts + 1):
            active = self.get_active_session(course_id)
            with self._locks.hold(active.session_id):
                current = self._sessions.get_by_id(active.session_id)
                if current is not None and current.is_open:
                    status = current.status_of(student_id)
                    if status is None:
                        raise NotFoundError("Sinh viên không có trong danh sách điểm danh")
                    if status == AttendanceStatus.PRESENT:
                        return current

                    saved = self._sessions.save_statuses(
                        current.with_present(student_id), expected_version=current.version
                    )
                    if saved:
                        logger.info("Marked %s present in session %s", student_id, saved.session_id)
                        return saved

            # Either another writer bumped the version or the session was replaced/closed.
            logger.warning(
                "Session update for %s/%s conflicted (attempt %d/%d)",
                course_id, student_id, attempt, self._max_attempts,
            )

        raise ConflictError("Cập nhật điểm danh thất bại do xung đột, vui lòng thử lại")

    def close_session(self, course_id: str) -> AttendanceSession:
        active = self.get_active_session(course_id)
        with self._locks.hold(active.session_id):
            closed = self._sessions.close(active.session_id, closed_at=self._clock())
        if not closed:
            raise NotFoundError("Buổi điểm danh đã được đóng")
        logger.info(
            "Closed session %s for course %s (%d/%d present)",
            closed.session_id, closed.course_id, closed.present_count, len(closed.statuses),
        )
        return closed
