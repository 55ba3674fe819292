from __future__ import annotations

from typing import Protocol, Sequence


class CourseRepository(Protocol):
    """Course/Roster service: ai đang đăng ký học môn nào.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    """

    def course_exists(self, course_id: str) -> bool:
        raise NotImplementedError

    def get_roster(self, course_id: str) -> Sequence[str]:
        raise NotImplementedError
