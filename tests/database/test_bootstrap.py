from pathlib import Path

from src.qr_attendance.qr_attendance.database.bootstrap import _strip_create_db_and_use, iter_sql_statements

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_splitter_ignores_semicolons_in_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); INSERT INTO t VALUES (\"c;d\");\nSELECT 1"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
        "SELECT 1",
    ]


def test_splitter_handles_escaped_quotes():
    sql = r"INSERT INTO t VALUES ('it\'s;fine'); SELECT 2;"

    assert list(iter_sql_statements(sql)) == [r"INSERT INTO t VALUES ('it\'s;fine')", "SELECT 2"]


def test_schema_defines_students_with_unique_key():
    sql = _strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8"))
    statements = list(iter_sql_statements(sql))

    assert len(statements) == 1
    assert "CREATE TABLE IF NOT EXISTS students" in statements[0]
    assert "PRIMARY KEY (registration_number)" in statements[0]
