from __future__ import annotations

from src.facesync.facesync.core.enums import AttendanceStatus, SessionStatus


def test_save_statuses_checks_version(sessions_repo, fixed_now):
    session = sessions_repo.create_session(course_id="CSC101", student_ids=["A", "B"], created_at=fixed_now)

    saved = sessions_repo.save_statuses(session.with_present("A"), expected_version=0)
    stale = sessions_repo.save_statuses(session.with_present("B"), expected_version=0)

    assert saved.version == 1
    assert stale is None
    current = sessions_repo.get_by_id(session.session_id)
    assert current.status_of("A") == AttendanceStatus.PRESENT
    assert current.status_of("B") == AttendanceStatus.ABSENT


def test_only_one_open_session_per_course(sessions_repo, fixed_now):
    first = sessions_repo.create_session(course_id="CSC101", student_ids=["A"], created_at=fixed_now)
    second = sessions_repo.create_session(course_id="CSC101", student_ids=["A"], created_at=fixed_now)
    other = sessions_repo.create_session(course_id="MTH201", student_ids=[], created_at=fixed_now)

    assert sessions_repo.get_by_id(first.session_id).status == SessionStatus.CLOSED
    assert sessions_repo.get_open_for_course("CSC101") == second
    assert sessions_repo.get_open_for_course("MTH201") == other


def test_close_only_open_sessions(sessions_repo, fixed_now):
    session = sessions_repo.create_session(course_id="CSC101", student_ids=["A"], created_at=fixed_now)

    assert sessions_repo.close(session.session_id, closed_at=fixed_now).status == SessionStatus.CLOSED
    assert sessions_repo.close(session.session_id, closed_at=fixed_now) is None
    assert sessions_repo.close(404, closed_at=fixed_now) is None
