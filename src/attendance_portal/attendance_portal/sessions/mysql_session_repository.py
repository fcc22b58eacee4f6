from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence, Tuple

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceSession
from .repository import SessionRepository

_COLUMNS = "session_id, timetable_slot_id, session_date, locked, created_at, locked_at"


def _to_session(r: dict) -> AttendanceSession:
    return AttendanceSession(
        session_id=int(r["session_id"]),
        timetable_slot_id=int(r["timetable_slot_id"]),
        session_date=r["session_date"],
        locked=bool(r["locked"]),
        created_at=r.get("created_at"),
        locked_at=r.get("locked_at"),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_sessions WHERE session_id=%s", (int(session_id),))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def get_for_slot_and_date(self, *, timetable_slot_id: int, session_date: date) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_sessions WHERE timetable_slot_id=%s AND session_date=%s",
                (int(timetable_slot_id), session_date),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def insert_or_get(self, *, timetable_slot_id: int, session_date: date) -> Tuple[AttendanceSession, bool]:
        with db_cursor(self._conn_factory) as (_, cur):
            # No-op update on duplicate: rowcount is 1 for a fresh insert, 0 when the key existed
            # (holds while the connection does not set CLIENT_FOUND_ROWS).
            cur.execute(
                """
                INSERT INTO attendance_sessions(timetable_slot_id, session_date)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE session_id=session_id
                """,
                (int(timetable_slot_id), session_date),
            )
            created = cur.rowcount == 1

            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_sessions WHERE timetable_slot_id=%s AND session_date=%s",
                (int(timetable_slot_id), session_date),
            )
            r = fetchone(cur)
            if not r:
                raise RuntimeError(f"session for slot {timetable_slot_id} on {session_date} vanished after insert")
            return _to_session(r), created

    def lock(self, *, session_id: int, locked_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_sessions SET locked=1, locked_at=%s WHERE session_id=%s AND locked=0",
                (locked_at, int(session_id)),
            )
            return cur.rowcount > 0

    def delete_if_unused(self, *, session_id: int, not_before: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE FROM attendance_sessions
                WHERE session_id=%s
                  AND locked=0
                  AND session_date >= %s
                  AND NOT EXISTS (SELECT 1 FROM attendance_marks m WHERE m.session_id=%s)
                """,
                (int(session_id), not_before, int(session_id)),
            )
            return cur.rowcount > 0

    def count_marks(self, session_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM attendance_marks WHERE session_id=%s", (int(session_id),))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def list_for_date(self, session_date: date) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_sessions WHERE session_date=%s ORDER BY session_id ASC",
                (session_date,),
            )
            return [_to_session(r) for r in fetchall(cur)]
