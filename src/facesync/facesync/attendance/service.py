from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Optional, Sequence

from ..common.validators import require_dimension, require_landmarks, require_non_empty
from ..core.constants import DEFAULT_SESSION_HISTORY_LIMIT, DEFAULT_TEMPLATE_CACHE_SECONDS
from ..matching.model import FaceTemplate, MatchResult
from ..matching.normalizer import LandmarkNormalizer
from ..matching.resolver import IdentityResolver
from ..sessions.model import AttendanceSession
from ..sessions.service import AttendanceSessionService
from ..templates.repository import TemplateRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Entry point used by the API layer: enroll, check in, run sessions.

    Check-in compares against an in-memory snapshot of the enrolled templates.
    The snapshot is reloaded when older than ``template_cache_seconds`` and
    dropped after every enrollment made through this service.
    """

    def __init__(
        self,
        templates: TemplateRepository,
        sessions: AttendanceSessionService,
        *,
        normalizer: Optional[LandmarkNormalizer] = None,
        resolver: Optional[IdentityResolver] = None,
        landmark_dim: Optional[int] = None,
        template_cache_seconds: float = DEFAULT_TEMPLATE_CACHE_SECONDS,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self._templates = templates
        self._sessions = sessions
        self._normalizer = normalizer or LandmarkNormalizer()
        self._resolver = resolver or IdentityResolver(self._normalizer)
        self._landmark_dim = int(landmark_dim) if landmark_dim else None
        self._cache_seconds = float(template_cache_seconds)
        self._monotonic = monotonic

        self._snapshot: Optional[tuple[FaceTemplate, ...]] = None
        self._snapshot_at = 0.0
        self._refresh_lock = threading.Lock()

    def _is_fresh(self, snapshot: Optional[tuple[FaceTemplate, ...]]) -> bool:
        return snapshot is not None and (self._monotonic() - self._snapshot_at) < self._cache_seconds

    def _template_snapshot(self) -> tuple[FaceTemplate, ...]:
        snapshot = self._snapshot
        if self._is_fresh(snapshot):
            return snapshot

        with self._refresh_lock:
            if self._is_fresh(self._snapshot):
                return self._snapshot
            snapshot = tuple(self._templates.get_all_templates())
            self._snapshot, self._snapshot_at = snapshot, self._monotonic()
            logger.debug("Loaded %d face templates", len(snapshot))
            return snapshot

    def reload_templates(self) -> int:
        with self._refresh_lock:
            self._snapshot = None
        return len(self._template_snapshot())

    def enroll(self, owner_id: str, raw_sample: Any) -> FaceTemplate:
        owner_id = require_non_empty(owner_id, "Mã người dùng")
        values = require_landmarks(raw_sample)
        require_dimension(values, self._landmark_dim or self._templates.dimension())

        vector = self._normalizer.normalize(values)
        template = self._templates.put_template(owner_id, vector.tolist())
        with self._refresh_lock:
            self._snapshot = None

        logger.info("Enrolled face template %s for %s (dim=%d)", template.template_id, owner_id, template.dimension)
        return template

    def check_in(self, raw_sample: Any) -> MatchResult:
        values = require_landmarks(raw_sample)
        templates = self._template_snapshot()
        require_dimension(values, self._landmark_dim or (templates[0].dimension if templates else None))

        result = self._resolver.resolve(values, templates)
        if result.matched:
            logger.info("Check-in matched %s (score=%.3f)", result.owner_id, result.score)
        else:
            logger.debug("Check-in found no match among %d templates", len(templates))
        return result

    def open_session(self, course_id: str) -> AttendanceSession:
        return self._sessions.open_session(course_id)

    def confirm_attendance(self, course_id: str, student_id: str) -> AttendanceSession:
        return self._sessions.mark_present(course_id, student_id)

    def get_active_session(self, course_id: str) -> AttendanceSession:
        return self._sessions.get_active_session(course_id)

    def close_session(self, course_id: str) -> AttendanceSession:
        return self._sessions.close_session(course_id)

    def get_session(self, session_id: int) -> AttendanceSession:
        return self._sessions.get_session(session_id)

    def list_sessions(self, course_id: str, *, limit: int = DEFAULT_SESSION_HISTORY_LIMIT) -> Sequence[AttendanceSession]:
        return self._sessions.list_sessions(course_id, limit=limit)
