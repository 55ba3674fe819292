from __future__ import annotations

import pytest

from src.facesync.facesync.attendance.service import AttendanceService
from src.facesync.facesync.core.enums import AttendanceStatus
from src.facesync.facesync.core.exceptions import DegenerateInputError, NotFoundError, ValidationError
from src.facesync.facesync.matching.model import NO_MATCH
from src.facesync.facesync.matching.normalizer import LandmarkNormalizer
from src.facesync.facesync.templates.memory_template_repository import InMemoryTemplateRepository

FACE_A = [0.0, 0.0, 4.0, 0.0, 2.0, 3.0]
FACE_B = [0.0, 0.0, 1.0, 4.0, 3.0, 1.0]


class FakeMonotonic:
    def __init__(self):
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _shifted(face, *, scale=2.0, offset=10.0):
    return [v * scale + offset for v in face]


@pytest.fixture
def templates_repo():
    return InMemoryTemplateRepository()


@pytest.fixture
def service(templates_repo, session_service):
    return AttendanceService(templates_repo, session_service, template_cache_seconds=0)


def test_enroll_then_check_in_matches_moved_face(service):
    service.enroll("A", FACE_A)
    service.enroll("B", FACE_B)

    result = service.check_in(_shifted(FACE_A))

    assert result.owner_id == "A"
    assert result.score == pytest.approx(1.0)


def test_check_in_without_templates_is_no_match(service):
    assert service.check_in(FACE_A) == NO_MATCH


def test_enrolled_template_is_normalized(service):
    template = service.enroll("A", _shifted(FACE_A, scale=7.0, offset=-3.0))
    again = service.enroll("A2", FACE_A)

    assert template.vector == pytest.approx(again.vector)


def test_re_enroll_keeps_template_id(service, templates_repo):
    first = service.enroll("A", FACE_A)
    second = service.enroll("A", FACE_B)

    assert second.template_id == first.template_id
    assert len(templates_repo.get_all_templates()) == 1
    assert service.check_in(FACE_B).owner_id == "A"


def test_enroll_validates_input(service):
    with pytest.raises(ValidationError):
        service.enroll("", FACE_A)
    with pytest.raises(ValidationError):
        service.enroll("A", "not-a-vector")
    with pytest.raises(ValidationError):
        service.enroll("A", [])
    with pytest.raises(DegenerateInputError):
        service.enroll("A", [1.0, 1.0, 1.0, 1.0])


def test_dimension_is_fixed_by_enrolled_templates(service):
    service.enroll("A", FACE_A)

    with pytest.raises(ValidationError):
        service.enroll("B", FACE_A + [5.0, 5.0])
    with pytest.raises(ValidationError):
        service.check_in(FACE_A + [5.0, 5.0])


def test_configured_dimension_is_enforced(session_service):
    service = AttendanceService(InMemoryTemplateRepository(dimension=8), session_service, landmark_dim=8)

    with pytest.raises(ValidationError):
        service.enroll("A", FACE_A)
    with pytest.raises(ValidationError):
        service.check_in(FACE_A)


def test_check_in_uses_cached_snapshot_until_it_expires(templates_repo, session_service):
    clock = FakeMonotonic()
    service = AttendanceService(templates_repo, session_service, template_cache_seconds=30, monotonic=clock)
    assert service.check_in(FACE_A) == NO_MATCH

    # Written by another process, bypassing this service
    templates_repo.put_template("A", LandmarkNormalizer().normalize(FACE_A).tolist())
    assert service.check_in(FACE_A) == NO_MATCH

    clock.now += 31
    assert service.check_in(FACE_A).owner_id == "A"


def test_enroll_refreshes_snapshot(templates_repo, session_service):
    service = AttendanceService(templates_repo, session_service, template_cache_seconds=3600, monotonic=FakeMonotonic())
    assert service.check_in(FACE_A) == NO_MATCH

    service.enroll("A", FACE_A)

    assert service.check_in(FACE_A).owner_id == "A"
    assert service.reload_templates() == 1


def test_check_in_then_confirm_attendance(service):
    service.enroll("A", FACE_A)
    service.enroll("B", FACE_B)
    service.open_session("CSC101")

    match = service.check_in(_shifted(FACE_B, scale=0.5, offset=3.0))
    session = service.confirm_attendance("CSC101", match.owner_id)

    assert session.status_of("B") == AttendanceStatus.PRESENT
    assert session.status_of("A") == AttendanceStatus.ABSENT
    assert service.get_active_session("CSC101") == session


def test_enrollment_after_open_does_not_join_session(service, courses):
    service.enroll("A", FACE_A)
    service.open_session("CSC101")

    courses.enroll_student("CSC101", "C")
    service.enroll("C", FACE_B)

    assert service.check_in(FACE_B).owner_id == "C"
    assert service.get_active_session("CSC101").student_ids == ("A", "B")
    with pytest.raises(NotFoundError):
        service.confirm_attendance("CSC101", "C")


def test_close_and_lookup_by_id(service):
    opened = service.open_session("CSC101")
    service.close_session("CSC101")

    assert not service.get_session(opened.session_id).is_open
    assert [s.session_id for s in service.list_sessions("CSC101")] == [opened.session_id]
