from __future__ import annotations

from datetime import datetime, timedelta

import numpy as np
import pytest

from src.facesync.facesync.courses.memory_course_repository import InMemoryCourseRepository
from src.facesync.facesync.sessions.memory_session_repository import InMemorySessionRepository
from src.facesync.facesync.sessions.service import AttendanceSessionService


class TickingClock:
    """Returns a strictly increasing time on every call."""

    def __init__(self, start: datetime):
        self._now = start

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


class PassThroughNormalizer:
    """Treats samples as already normalized."""

    def normalize(self, vector):
        return np.asarray(vector, dtype=np.float64)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 8, 0, 0)


@pytest.fixture
def clock(fixed_now) -> TickingClock:
    return TickingClock(fixed_now)


@pytest.fixture
def passthrough_normalizer() -> PassThroughNormalizer:
    return PassThroughNormalizer()


@pytest.fixture
def courses() -> InMemoryCourseRepository:
    return InMemoryCourseRepository({"CSC101": ["A", "B"], "MTH201": []})


@pytest.fixture
def sessions_repo() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def session_service(sessions_repo, courses, clock) -> AttendanceSessionService:
    return AttendanceSessionService(sessions_repo, courses, clock=clock)
