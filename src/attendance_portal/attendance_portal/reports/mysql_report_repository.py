from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Sequence, Tuple

from ..core.enums import MarkStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, normalize_mysql_time, optional_int
from .model import DailyMarkCount, SessionFact, SubjectRef
from .repository import ReportRepository


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_class_sessions(self, class_id: int, *, subject_id: Optional[int] = None) -> Sequence[SessionFact]:
        clauses = ["ts.class_id=%s"]
        params: list[object] = [int(class_id)]
        if subject_id is not None:
            clauses.append("ts.subject_id=%s")
            params.append(int(subject_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    s.session_id, s.timetable_slot_id, s.session_date, s.locked,
                    ts.class_id, ts.subject_id, ts.batch_id, ts.start_time, ts.end_time,
                    COALESCE(sub.subject_name, '') AS subject_name
                FROM attendance_sessions s
                JOIN timetable_slots ts ON ts.slot_id = s.timetable_slot_id
                LEFT JOIN subjects sub ON sub.subject_id = ts.subject_id
                WHERE {where}
                ORDER BY s.session_date ASC, ts.start_time ASC, s.session_id ASC
                """,
                tuple(params),
            )
            return [
                SessionFact(
                    session_id=int(r["session_id"]),
                    timetable_slot_id=int(r["timetable_slot_id"]),
                    session_date=r["session_date"],
                    locked=bool(r["locked"]),
                    class_id=int(r["class_id"]),
                    subject_id=int(r["subject_id"]),
                    subject_name=r["subject_name"],
                    start_time=normalize_mysql_time(r["start_time"]),
                    end_time=normalize_mysql_time(r["end_time"]),
                    batch_id=optional_int(r.get("batch_id")),
                )
                for r in fetchall(cur)
            ]

    def marks_for_sessions(
        self,
        session_ids: Sequence[int],
        *,
        student_id: Optional[int] = None,
    ) -> Dict[Tuple[int, int], MarkStatus]:
        ids = [int(s) for s in session_ids]
        if not ids:
            return {}

        sql = f"SELECT session_id, student_id, status FROM attendance_marks WHERE session_id IN ({in_clause(ids)})"
        params: list[object] = list(ids)
        if student_id is not None:
            sql += " AND student_id=%s"
            params.append(int(student_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return {
                (int(r["session_id"]), int(r["student_id"])): MarkStatus(r["status"])
                for r in fetchall(cur)
            }

    def list_class_subjects(self, class_id: int) -> Sequence[SubjectRef]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT ts.subject_id, COALESCE(sub.subject_name, '') AS subject_name, ts.batch_id
                FROM timetable_slots ts
                LEFT JOIN subjects sub ON sub.subject_id = ts.subject_id
                WHERE ts.class_id=%s
                ORDER BY subject_name ASC, ts.subject_id ASC
                """,
                (int(class_id),),
            )
            return [
                SubjectRef(
                    subject_id=int(r["subject_id"]),
                    subject_name=r["subject_name"],
                    batch_id=optional_int(r.get("batch_id")),
                )
                for r in fetchall(cur)
            ]

    def daily_mark_counts(self, start: date, end: date) -> Sequence[DailyMarkCount]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    s.session_date AS day,
                    COALESCE(SUM(m.status = 'P'), 0) AS present,
                    COUNT(m.mark_id) AS marked
                FROM attendance_sessions s
                LEFT JOIN attendance_marks m ON m.session_id = s.session_id
                WHERE s.locked=1 AND s.session_date BETWEEN %s AND %s
                GROUP BY s.session_date
                ORDER BY s.session_date ASC
                """,
                (start, end),
            )
            return [
                DailyMarkCount(day=r["day"], present=int(r["present"]), marked=int(r["marked"]))
                for r in fetchall(cur)
            ]
