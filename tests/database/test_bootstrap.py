from __future__ import annotations

import pytest

from src.classroom_admin.classroom_admin.database import bootstrap


class RecordingCursor:
    def __init__(self, fail_on=None):
        self.executed = []
        self.fail_on = fail_on

    def execute(self, sql, params=None):
        if self.fail_on and self.fail_on in sql:
            raise RuntimeError("statement failed")
        self.executed.append(sql)

    def fetchall(self):
        return [("cohorts",), ("users",)]


class RecordingConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.commits = 0
        self.closed = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.commits += 1

    def close(self):
        self.closed = True


@pytest.fixture
def fake_mysql(monkeypatch):
    opened = []

    def connect(**kwargs):
        conn = RecordingConnection(RecordingCursor(fail_on=connect.fail_on))
        conn.kwargs = kwargs
        opened.append(conn)
        return conn

    connect.fail_on = None
    monkeypatch.setattr(bootstrap.mysql.connector, "connect", connect)
    return opened, connect


DB = {"host": "db", "port": 3307, "user": "u", "password": "p", "database": "classroom_test"}


def test_sql_splitter_ignores_semicolons_inside_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); INSERT INTO t VALUES (\"c;d\");\nSELECT 1"

    assert list(bootstrap.iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
        "SELECT 1",
    ]


def test_apply_schema_runs_statements_and_closes_connections(fake_mysql, tmp_path):
    opened, _ = fake_mysql
    schema = tmp_path / "schema.sql"
    schema.write_text(
        "CREATE DATABASE IF NOT EXISTS other;\nUSE other;\n-- comment\n"
        "CREATE TABLE a (id INT);\nCREATE TABLE b (id INT);\n",
        encoding="utf-8",
    )

    bootstrap.apply_schema(DB, schema_path=schema)

    create_db, script = opened
    assert "database" not in create_db.kwargs
    assert script.kwargs["database"] == "classroom_test"
    assert script._cursor.executed == ["CREATE TABLE a (id INT)", "CREATE TABLE b (id INT)"]
    assert script.commits == 1
    assert all(conn.closed for conn in opened)


def test_connection_is_closed_when_a_statement_fails(fake_mysql, tmp_path):
    opened, connect = fake_mysql
    connect.fail_on = "broken"
    seed = tmp_path / "seed.sql"
    seed.write_text("INSERT INTO a VALUES (1);\nbroken statement;\n", encoding="utf-8")

    with pytest.raises(RuntimeError):
        bootstrap.apply_seed_sql(DB, seed_path=seed)

    assert opened[0].closed
    assert opened[0].commits == 0


def test_list_tables(fake_mysql):
    assert bootstrap.list_tables(DB) == ["cohorts", "users"]
