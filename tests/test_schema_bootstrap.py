from __future__ import annotations

from pathlib import Path

from src.facesync.facesync.database.bootstrap import split_statements

SCHEMA = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


def test_schema_splits_into_executable_statements():
    statements = list(split_statements(SCHEMA.read_text(encoding="utf-8")))

    assert all(not s.startswith("--") for s in statements)
    assert not any(s.upper().startswith(("CREATE DATABASE", "USE ")) for s in statements)
    assert statements[0].startswith("CREATE TABLE IF NOT EXISTS courses")
    assert statements[-1].startswith("INSERT IGNORE INTO face_template_settings")


def test_comments_and_quotes_do_not_split():
    sql = """
    -- header; with a semicolon
    INSERT INTO t VALUES ('a;b', "c;d"); # trailing; comment
    SELECT 1
    """

    assert list(split_statements(sql)) == ["INSERT INTO t VALUES ('a;b', \"c;d\")", "SELECT 1"]
