from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from .attendance.service import AttendanceService
from .core.constants import (
    DEFAULT_LANDMARK_POINT_DIM,
    DEFAULT_MATCH_THRESHOLD,
    DEFAULT_SESSION_LOCK_TIMEOUT_SECONDS,
    DEFAULT_SESSION_UPDATE_ATTEMPTS,
    DEFAULT_TEMPLATE_CACHE_SECONDS,
)
from .core.enums import StorageBackend
from .courses.memory_course_repository import InMemoryCourseRepository
from .courses.mysql_course_repository import MySQLCourseRepository
from .courses.repository import CourseRepository
from .database.connection import DBConfig, DatabaseConnection
from .matching.normalizer import LandmarkNormalizer
from .matching.resolver import IdentityResolver
from .sessions.locks import SessionLockRegistry
from .sessions.memory_session_repository import InMemorySessionRepository
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import AttendanceSessionService
from .templates.memory_template_repository import InMemoryTemplateRepository
from .templates.mysql_template_repository import MySQLTemplateRepository
from .templates.repository import TemplateRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    templates_repo: TemplateRepository
    courses_repo: CourseRepository
    sessions_repo: SessionRepository

    resolver: IdentityResolver
    session_locks: SessionLockRegistry
    session_service: AttendanceSessionService
    attendance_service: AttendanceService


def build_container(
    *,
    db_config: Optional[dict] = None,
    backend: str = StorageBackend.MYSQL.value,
    match_threshold: float = DEFAULT_MATCH_THRESHOLD,
    landmark_dim: Optional[int] = None,
    landmark_point_dim: int = DEFAULT_LANDMARK_POINT_DIM,
    session_update_attempts: int = DEFAULT_SESSION_UPDATE_ATTEMPTS,
    session_lock_timeout: float = DEFAULT_SESSION_LOCK_TIMEOUT_SECONDS,
    template_cache_seconds: float = DEFAULT_TEMPLATE_CACHE_SECONDS,
    rosters: Optional[Mapping[str, Iterable[str]]] = None,
) -> Container:
    """Wire repositories and services for `backend`.

    `rosters` seeds the course repository of the memory backend; the MySQL
    backend reads rosters from `course_enrollments` instead.
    """
    conn: Optional[DatabaseConnection] = None
    if StorageBackend(backend) == StorageBackend.MYSQL:
        if not db_config:
            raise ValueError("db_config is required for the mysql backend")
        config = DBConfig(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config["password"]),
            database=str(db_config["database"]),
        )
        conn = DatabaseConnection.get_instance(config)
        templates_repo: TemplateRepository = MySQLTemplateRepository(conn, dimension=landmark_dim)
        courses_repo: CourseRepository = MySQLCourseRepository(conn)
        sessions_repo: SessionRepository = MySQLSessionRepository(conn)
    else:
        templates_repo = InMemoryTemplateRepository(dimension=landmark_dim)
        courses_repo = InMemoryCourseRepository(dict(rosters or {}))
        sessions_repo = InMemorySessionRepository()

    normalizer = LandmarkNormalizer(point_dim=landmark_point_dim)
    resolver = IdentityResolver(normalizer, threshold=match_threshold)
    session_locks = SessionLockRegistry(timeout=session_lock_timeout)
    session_service = AttendanceSessionService(
        sessions_repo,
        courses_repo,
        locks=session_locks,
        max_attempts=session_update_attempts,
    )
    attendance_service = AttendanceService(
        templates_repo,
        session_service,
        normalizer=normalizer,
        resolver=resolver,
        landmark_dim=landmark_dim,
        template_cache_seconds=template_cache_seconds,
    )

    return Container(
        conn=conn,
        templates_repo=templates_repo,
        courses_repo=courses_repo,
        sessions_repo=sessions_repo,
        resolver=resolver,
        session_locks=session_locks,
        session_service=session_service,
        attendance_service=attendance_service,
    )
