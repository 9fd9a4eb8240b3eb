"""Data access for the `employee` table.

Each operation acquires its own connection and closes it before returning,
so nothing is shared between requests. All statements are parameterized.
"""
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import pymysql
import pymysql.cursors
from pymysql.constants import CLIENT
import structlog

logger = structlog.get_logger(__name__)

INSERT_SQL = """
INSERT INTO employee (name, email, phone, address)
VALUES (%s, %s, %s, %s)
"""
SELECT_ALL_SQL = "SELECT * FROM employee ORDER BY id DESC"
SELECT_ONE_SQL = "SELECT * FROM employee WHERE id = %s"
UPDATE_SQL = """
UPDATE employee SET name = %s, email = %s, phone = %s, address = %s
WHERE id = %s
"""
DELETE_SQL = "DELETE FROM employee WHERE id = %s"


class RepositoryError(Exception):
    """Base class for failures the caller has to handle."""


class ConnectionFailure(RepositoryError):
    """The database could not be reached."""


class QueryFailed(RepositoryError):
    """A read statement failed; distinct from an empty result."""


@dataclass(frozen=True)
class StoredRecord:
    id: int
    name: str
    email: str
    phone: str
    address: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row['id'],
            name=row['name'],
            email=row['email'],
            phone=row['phone'],
            address=row['address'],
            created_at=row.get('created_at'),
        )


def mysql_connector(db_config):
    """Build a connection factory for PyMySQL with dict rows.

    FOUND_ROWS makes UPDATE return matched rather than changed rows.
    """
    def connect():
        return pymysql.connect(cursorclass=pymysql.cursors.DictCursor,
                               client_flag=CLIENT.FOUND_ROWS, **db_config)
    return connect


class EmployeeRepository:

    def __init__(self, connect):
        # `connect` is a zero-argument callable returning a DB-API connection
        self._connect = connect

    @contextmanager
    def connection(self):
        """Yield a fresh connection and always close it afterwards."""
        try:
            conn = self._connect()
        except pymysql.MySQLError as e:
            logger.error("db_connection_failed", error=str(e))
            raise ConnectionFailure("Database connection error") from e
        try:
            yield conn
        finally:
            if getattr(conn, 'open', True):
                conn.close()

    def _write(self, event, sql, params, expected_rows=1):
        # Commits only when the statement touched exactly `expected_rows` rows
        with self.connection() as conn:
            try:
                with conn.cursor() as cursor:
                    written = cursor.execute(sql, params)
                if written != expected_rows:
                    logger.warning(event, error="unexpected row count", rows=written)
                    conn.rollback()
                    return False
                conn.commit()
                return True
            except pymysql.MySQLError as e:
                logger.error(event, error=str(e))
                if getattr(conn, 'open', True):
                    conn.rollback()
                return False

    def insert(self, record):
        """Insert a validated record. Returns False (never raises) on write failure."""
        return self._write("employee_insert_failed", INSERT_SQL, record.as_params())

    def list_all(self):
        """All employees, newest first. Raises QueryFailed if the select fails."""
        with self.connection() as conn:
            try:
                with conn.cursor() as cursor:
                    cursor.execute(SELECT_ALL_SQL)
                    rows = cursor.fetchall()
            except pymysql.MySQLError as e:
                logger.error("employee_list_failed", error=str(e))
                raise QueryFailed("Unable to retrieve employee data") from e
        return [StoredRecord.from_row(row) for row in rows or ()]

    def get(self, employee_id):
        with self.connection() as conn:
            try:
                with conn.cursor() as cursor:
                    cursor.execute(SELECT_ONE_SQL, (employee_id,))
                    row = cursor.fetchone()
            except pymysql.MySQLError as e:
                logger.error("employee_get_failed", employee_id=employee_id, error=str(e))
                raise QueryFailed("Unable to retrieve employee data") from e
        return StoredRecord.from_row(row) if row else None

    def update(self, employee_id, record):
        """Rewrite the four editable fields; id and created_at are untouched.

        Connections report matched rows (FOUND_ROWS), so an unchanged row still
        counts as one and a missing row as zero.
        """
        return self._write("employee_update_failed", UPDATE_SQL,
                           record.as_params() + (employee_id,))

    def delete(self, employee_id):
        return self._write("employee_delete_failed", DELETE_SQL, (employee_id,))
