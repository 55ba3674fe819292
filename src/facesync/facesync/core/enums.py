from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Trạng thái điểm danh của một sinh viên trong buổi học."""

    ABSENT = "Absent"
    PRESENT = "Present"


class SessionStatus(str, Enum):
    """Trạng thái của một buổi điểm danh (chỉ một buổi OPEN cho mỗi môn)."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    MYSQL = "mysql"
