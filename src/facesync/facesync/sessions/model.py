from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus, SessionStatus


@dataclass(frozen=True)
class StudentStatus:
    student_id: str
    status: AttendanceStatus = AttendanceStatus.ABSENT


@dataclass(frozen=True)
class AttendanceSession:
    """Thực thể miền (domain): một buổi điểm danh của một môn học.

    Danh sách sinh viên là ảnh chụp roster lúc mở buổi, không thêm/bớt về sau.
    `version` tăng mỗi lần lưu, dùng để phát hiện ghi đè đồng thời.
    """

    session_id: int
    course_id: str
    created_at: datetime
    statuses: tuple[StudentStatus, ...]
    status: SessionStatus = SessionStatus.OPEN
    version: int = 0
    closed_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.status == SessionStatus.OPEN

    @property
    def student_ids(self) -> tuple[str, ...]:
        return tuple(s.student_id for s in self.statuses)

    @property
    def present_count(self) -> int:
        return sum(1 for s in self.statuses if s.status == AttendanceStatus.PRESENT)

    def status_of(self, student_id: str) -> Optional[AttendanceStatus]:
        for s in self.statuses:
            if s.student_id == student_id:
                return s.status
        return None

    def with_present(self, student_id: str) -> "AttendanceSession":
        """Copy with ``student_id`` marked PRESENT; version is left to the store."""

        return replace(
            self,
            statuses=tuple(
                StudentStatus(s.student_id, AttendanceStatus.PRESENT) if s.student_id == student_id else s
                for s in self.statuses
            ),
        )

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "course_id": self.course_id,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "closed_at": self.closed_at.isoformat() if self.closed_at else None,
            "version": self.version,
            "present_count": self.present_count,
            "students": [{"student": s.student_id, "status": s.status.value} for s in self.statuses],
        }
