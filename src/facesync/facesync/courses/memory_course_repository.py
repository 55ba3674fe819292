from __future__ import annotations

import threading
from typing import Iterable, Optional, Sequence

from .repository import CourseRepository


class InMemoryCourseRepository(CourseRepository):
    def __init__(self, rosters: Optional[dict[str, Iterable[str]]] = None):
        self._lock = threading.Lock()
        self._rosters: dict[str, list[str]] = {}
        for course_id, students in (rosters or {}).items():
            self.add_course(course_id, students)

    def add_course(self, course_id: str, students: Iterable[str] = ()) -> None:
        with self._lock:
            self._rosters[course_id] = list(students)

    def enroll_student(self, course_id: str, student_id: str) -> None:
        with self._lock:
            roster = self._rosters.setdefault(course_id, [])
            if student_id not in roster:
                roster.append(student_id)

    def course_exists(self, course_id: str) -> bool:
        return course_id in self._rosters

    def get_roster(self, course_id: str) -> Sequence[str]:
        with self._lock:
            return tuple(self._rosters.get(course_id, ()))
