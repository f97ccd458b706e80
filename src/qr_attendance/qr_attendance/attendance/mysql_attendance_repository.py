from __future__ import annotations

from typing import Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        registration_number=r["registration_number"],
        first_name=r["first_name"],
        last_name=r.get("last_name") or "",
        marked_at=r.get("marked_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_registration_number(self, registration_number: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory, readonly=True) as (_, cur):
            cur.execute(
                """
                SELECT registration_number, first_name, last_name, marked_at
                FROM students
                WHERE registration_number=%s
                """,
                (registration_number,),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def insert(self, record: AttendanceRecord) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO students(registration_number, first_name, last_name, marked_at)
                    VALUES(%s,%s,%s,COALESCE(%s, CURRENT_TIMESTAMP))
                    """,
                    (record.registration_number, record.first_name, record.last_name, record.marked_at),
                )
        except IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise DuplicateRecordError(record.registration_number) from e
            raise

    def list_recent(self, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory, readonly=True) as (_, cur):
            cur.execute(
                """
                SELECT registration_number, first_name, last_name, marked_at
                FROM students
                ORDER BY marked_at DESC, registration_number ASC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_to_record(r) for r in fetchall(cur)]
