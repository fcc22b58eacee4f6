from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, optional_int
from .model import SlotDraft, TimetableSlot
from .repository import TimetableRepository

_COLUMNS = "slot_id, day_of_week, start_time, end_time, class_id, subject_id, faculty_id, batch_id"


def _to_slot(r: dict) -> TimetableSlot:
    return TimetableSlot(
        slot_id=int(r["slot_id"]),
        day_of_week=int(r["day_of_week"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        class_id=int(r["class_id"]),
        subject_id=int(r["subject_id"]),
        faculty_id=optional_int(r.get("faculty_id")),
        batch_id=optional_int(r.get("batch_id")),
    )


class MySQLTimetableRepository(TimetableRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, slot_id: int) -> Optional[TimetableSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM timetable_slots WHERE slot_id=%s", (int(slot_id),))
            r = fetchone(cur)
            return _to_slot(r) if r else None

    def list_for_day(self, day_of_week: int) -> Sequence[TimetableSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM timetable_slots
                WHERE day_of_week=%s
                ORDER BY start_time ASC, slot_id ASC
                """,
                (int(day_of_week),),
            )
            return [_to_slot(r) for r in fetchall(cur)]

    def list_for_class(self, class_id: int) -> Sequence[TimetableSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM timetable_slots
                WHERE class_id=%s
                ORDER BY day_of_week ASC, start_time ASC
                """,
                (int(class_id),),
            )
            return [_to_slot(r) for r in fetchall(cur)]

    def create(self, draft: SlotDraft) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO timetable_slots(day_of_week, start_time, end_time, class_id, subject_id, faculty_id, batch_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    draft.day_of_week,
                    draft.start_time,
                    draft.end_time,
                    draft.class_id,
                    draft.subject_id,
                    draft.faculty_id,
                    draft.batch_id,
                ),
            )
            return int(cur.lastrowid)

    def update(self, slot_id: int, draft: SlotDraft) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE timetable_slots
                SET day_of_week=%s, start_time=%s, end_time=%s, class_id=%s, subject_id=%s, faculty_id=%s, batch_id=%s
                WHERE slot_id=%s
                """,
                (
                    draft.day_of_week,
                    draft.start_time,
                    draft.end_time,
                    draft.class_id,
                    draft.subject_id,
                    draft.faculty_id,
                    draft.batch_id,
                    int(slot_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, slot_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM timetable_slots WHERE slot_id=%s", (int(slot_id),))
            return cur.rowcount > 0

    def has_sessions(self, slot_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM attendance_sessions WHERE timetable_slot_id=%s LIMIT 1", (int(slot_id),))
            return fetchone(cur) is not None
