import sqlite3

import pytest

from employee_manager.repository import EmployeeRepository

SQLITE_SCHEMA = """
CREATE TABLE employee (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    phone TEXT NOT NULL,
    address TEXT NOT NULL,
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
)
"""


class SQLiteCursor:
    """Cursor with PyMySQL's `%s` placeholders, dict rows and row-count returns."""

    def __init__(self, conn):
        self._cursor = conn.cursor()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self._cursor.close()

    def execute(self, sql, params=()):
        self._cursor.execute(sql.replace('%s', '?'), params)
        return max(self._cursor.rowcount, 0)

    def fetchall(self):
        return [dict(row) for row in self._cursor.fetchall()]

    def fetchone(self):
        row = self._cursor.fetchone()
        return dict(row) if row else None


class SQLiteConnection:

    def __init__(self, path):
        self._conn = sqlite3.connect(path)
        self._conn.row_factory = sqlite3.Row
        self.open = True

    def cursor(self):
        return SQLiteCursor(self._conn)

    def commit(self):
        self._conn.commit()

    def rollback(self):
        self._conn.rollback()

    def close(self):
        self._conn.close()
        self.open = False


class ConnectionFactory:
    """Hands out a new connection per call and remembers them for assertions."""

    def __init__(self, path):
        self.path = path
        self.connections = []

    def __call__(self):
        conn = SQLiteConnection(self.path)
        self.connections.append(conn)
        return conn


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "employees.db")
    conn = sqlite3.connect(path)
    conn.execute(SQLITE_SCHEMA)
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def connect(db_path):
    return ConnectionFactory(db_path)


@pytest.fixture
def repository(connect):
    return EmployeeRepository(connect)


@pytest.fixture
def valid_form():
    return {
        "name": "Jane Doe",
        "email": "jane@x.com",
        "phone": "1234567890",
        "address": "123 Main St, City",
    }
