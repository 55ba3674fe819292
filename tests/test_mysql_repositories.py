from __future__ import annotations

import copy

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import InternalError, ProgrammingError

from src.facesync.facesync.core.exceptions import ConflictError, ValidationError
from src.facesync.facesync.sessions.mysql_session_repository import MySQLSessionRepository
from src.facesync.facesync.sessions.service import AttendanceSessionService
from src.facesync.facesync.templates.mysql_template_repository import MySQLTemplateRepository


class FakeTemplateDB:
    """Just enough of `face_template_settings` / `face_templates` for the template repository."""

    def __init__(self, dimension=None):
        self.state = {"dimension": dimension, "rows": {}, "next_id": 1}
        self.statements: list[tuple[int, str]] = []
        self.connections = 0
        self.rollbacks = 0

    def connect(self):
        self.connections += 1
        return FakeTemplateConnection(self, self.connections)


class FakeTemplateConnection:
    def __init__(self, db: FakeTemplateDB, number: int):
        self.db = db
        self.number = number
        self.work = copy.deepcopy(db.state)

    def cursor(self, dictionary=True):
        return FakeTemplateCursor(self)

    def commit(self):
        self.db.state = self.work

    def rollback(self):
        self.db.rollbacks += 1

    def close(self):
        pass


class FakeTemplateCursor:
    def __init__(self, conn: FakeTemplateConnection):
        self.conn = conn
        self._result = []

    def execute(self, sql, params=()):
        sql = " ".join(sql.split())
        self.conn.db.statements.append((self.conn.number, sql))
        work = self.conn.work
        rows = sorted(work["rows"].values(), key=lambda r: r["template_id"])

        if sql.startswith("SELECT dimension FROM face_template_settings"):
            self._result = [{"dimension": work["dimension"]}]
        elif sql.startswith("UPDATE face_template_settings"):
            work["dimension"] = params[0]
        elif sql.startswith("SELECT dimension FROM face_templates"):
            self._result = [{"dimension": r["dimension"]} for r in rows[:1]]
        elif sql.startswith("INSERT INTO face_templates"):
            owner_id, dimension, vector_json = params
            row = work["rows"].get(owner_id)
            if row is None:
                row = {"template_id": work["next_id"], "owner_id": owner_id, "created_at": None}
                work["next_id"] += 1
                work["rows"][owner_id] = row
            row.update(dimension=dimension, vector_json=vector_json)
        elif "WHERE owner_id" in sql:
            self._result = [dict(work["rows"][params[0]])] if params[0] in work["rows"] else []
        elif sql.startswith("SELECT template_id"):
            self._result = [dict(r) for r in rows]
        else:
            raise AssertionError(f"unexpected SQL: {sql}")

    def fetchone(self):
        return self._result[0] if self._result else None

    def fetchall(self):
        return list(self._result)

    def close(self):
        pass


def test_first_template_fixes_dimension_in_the_same_transaction():
    db = FakeTemplateDB()
    repo = MySQLTemplateRepository(db)

    template = repo.put_template("A", [1.0, 0.0, 0.0, 1.0])

    assert template.template_id == 1
    assert repo.dimension() == 4
    put_statements = [sql for conn, sql in db.statements if conn == 1]
    assert put_statements[0].endswith("FOR UPDATE")
    assert put_statements[1].startswith("SELECT dimension FROM face_templates")
    assert put_statements[2].startswith("UPDATE face_template_settings")
    assert put_statements[3].startswith("INSERT INTO face_templates")


def test_second_dimension_is_rejected_and_rolled_back():
    db = FakeTemplateDB()
    repo = MySQLTemplateRepository(db)
    repo.put_template("A", [1.0, 0.0, 0.0, 1.0])

    with pytest.raises(ValidationError):
        repo.put_template("B", [1.0, 0.0, 0.0, 1.0, 0.5, 0.5])

    assert db.rollbacks == 1
    assert [t.owner_id for t in repo.get_all_templates()] == ["A"]


def test_configured_dimension_wins_over_stored_one():
    db = FakeTemplateDB(dimension=None)
    repo = MySQLTemplateRepository(db, dimension=2)

    with pytest.raises(ValidationError):
        repo.put_template("A", [1.0, 0.0, 0.0, 1.0])

    assert repo.put_template("A", [1.0, 0.0]).dimension == 2
    assert db.state["dimension"] == 2


def test_reenrolling_keeps_template_id():
    db = FakeTemplateDB()
    repo = MySQLTemplateRepository(db)
    first = repo.put_template("A", [1.0, 0.0])
    repo.put_template("B", [0.0, 1.0])

    again = repo.put_template("A", [0.6, 0.8])

    assert again.template_id == first.template_id
    assert again.vector == (0.6, 0.8)


class FakeSessionDB:
    """Serves the statements of `create_session` and fails the session insert with `error`."""

    def __init__(self, error):
        self.error = error
        self.inserts = 0
        self.rollbacks = 0
        self.statements: list[str] = []

    def connect(self):
        return FakeSessionConnection(self)


class FakeSessionConnection:
    def __init__(self, db: FakeSessionDB):
        self.db = db

    def cursor(self, dictionary=True):
        return FakeSessionCursor(self.db)

    def commit(self):
        pass

    def rollback(self):
        self.db.rollbacks += 1

    def close(self):
        pass


class FakeSessionCursor:
    def __init__(self, db: FakeSessionDB):
        self.db = db
        self.rowcount = 0
        self._row = None

    def execute(self, sql, params=()):
        sql = " ".join(sql.split())
        self.db.statements.append(sql)
        if sql.startswith("SELECT course_id FROM courses"):
            self._row = {"course_id": params[0]}
        elif sql.startswith("INSERT INTO attendance_sessions"):
            self.db.inserts += 1
            raise self.db.error

    def fetchone(self):
        return self._row

    def close(self):
        pass


def test_open_locks_the_course_row_first(fixed_now):
    db = FakeSessionDB(InternalError(msg="Deadlock found", errno=errorcode.ER_LOCK_DEADLOCK))
    repo = MySQLSessionRepository(db)

    repo.create_session(course_id="CSC101", student_ids=["A"], created_at=fixed_now)

    assert db.statements[0] == "SELECT course_id FROM courses WHERE course_id=%s FOR UPDATE"


@pytest.mark.parametrize("errno", [errorcode.ER_LOCK_DEADLOCK, errorcode.ER_LOCK_WAIT_TIMEOUT])
def test_deadlocked_open_counts_as_a_lost_race(fixed_now, errno):
    db = FakeSessionDB(InternalError(msg="Lock conflict", errno=errno))
    repo = MySQLSessionRepository(db)

    assert repo.create_session(course_id="CSC101", student_ids=["A"], created_at=fixed_now) is None
    assert db.rollbacks == 1


def test_deadlocked_opens_surface_as_conflict(courses, clock):
    db = FakeSessionDB(InternalError(msg="Deadlock found", errno=errorcode.ER_LOCK_DEADLOCK))
    service = AttendanceSessionService(MySQLSessionRepository(db), courses, max_attempts=3, clock=clock)

    with pytest.raises(ConflictError):
        service.open_session("CSC101")

    assert db.inserts == 3


def test_other_database_errors_propagate(fixed_now):
    db = FakeSessionDB(ProgrammingError(msg="Table missing", errno=errorcode.ER_NO_SUCH_TABLE))
    repo = MySQLSessionRepository(db)

    with pytest.raises(ProgrammingError):
        repo.create_session(course_id="CSC101", student_ids=["A"], created_at=fixed_now)
