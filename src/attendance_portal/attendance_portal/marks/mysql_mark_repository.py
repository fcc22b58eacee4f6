from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import MarkStatus
from ..core.exceptions import NotFoundError, SessionLockedError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceMark, FrequentlyEditedMark, MarkAuditEntry
from .repository import MarkRepository

_COLUMNS = "mark_id, session_id, student_id, status, edited_by, edited_at, edit_count"


def _to_mark(r: dict) -> AttendanceMark:
    return AttendanceMark(
        mark_id=int(r["mark_id"]),
        session_id=int(r["session_id"]),
        student_id=int(r["student_id"]),
        status=MarkStatus(r["status"]),
        edited_by=int(r["edited_by"]),
        edited_at=r["edited_at"],
        edit_count=int(r.get("edit_count") or 0),
    )


class MySQLMarkRepository(MarkRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def write_mark(
        self,
        *,
        session_id: int,
        student_id: int,
        status: MarkStatus,
        edited_by: int,
        edited_at: datetime,
        reason: Optional[str] = None,
    ) -> AttendanceMark:
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock on the session serializes this write against lock_session().
            cur.execute("SELECT locked FROM attendance_sessions WHERE session_id=%s FOR UPDATE", (int(session_id),))
            session = fetchone(cur)
            if not session:
                raise NotFoundError("Attendance session not found")
            if session["locked"]:
                raise SessionLockedError("Attendance session is locked")

            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_marks WHERE session_id=%s AND student_id=%s FOR UPDATE",
                (int(session_id), int(student_id)),
            )
            existing = fetchone(cur)

            if not existing:
                cur.execute(
                    """
                    INSERT INTO attendance_marks(session_id, student_id, status, edited_by, edited_at, edit_count)
                    VALUES(%s,%s,%s,%s,%s,0)
                    """,
                    (int(session_id), int(student_id), status.value, int(edited_by), edited_at),
                )
                return AttendanceMark(
                    mark_id=int(cur.lastrowid),
                    session_id=int(session_id),
                    student_id=int(student_id),
                    status=status,
                    edited_by=int(edited_by),
                    edited_at=edited_at,
                )

            mark = _to_mark(existing)
            if mark.status == status:
                return mark

            cur.execute(
                """
                UPDATE attendance_marks
                SET status=%s, edited_by=%s, edited_at=%s, edit_count=edit_count+1
                WHERE mark_id=%s
                """,
                (status.value, int(edited_by), edited_at, mark.mark_id),
            )
            cur.execute(
                """
                INSERT INTO mark_audit_logs(mark_id, old_status, new_status, edited_by, reason, edited_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (mark.mark_id, mark.status.value, status.value, int(edited_by), reason, edited_at),
            )
            return AttendanceMark(
                mark_id=mark.mark_id,
                session_id=mark.session_id,
                student_id=mark.student_id,
                status=status,
                edited_by=int(edited_by),
                edited_at=edited_at,
                edit_count=mark.edit_count + 1,
            )

    def get_mark(self, *, session_id: int, student_id: int) -> Optional[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_marks WHERE session_id=%s AND student_id=%s",
                (int(session_id), int(student_id)),
            )
            r = fetchone(cur)
            return _to_mark(r) if r else None

    def list_for_session(self, session_id: int) -> Sequence[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_marks WHERE session_id=%s ORDER BY student_id ASC",
                (int(session_id),),
            )
            return [_to_mark(r) for r in fetchall(cur)]

    def list_audit(self, *, session_id: int, student_id: int) -> Sequence[MarkAuditEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT al.audit_id, al.mark_id, al.old_status, al.new_status, al.edited_by, al.reason, al.edited_at
                FROM mark_audit_logs al
                JOIN attendance_marks m ON m.mark_id = al.mark_id
                WHERE m.session_id=%s AND m.student_id=%s
                ORDER BY al.edited_at ASC, al.audit_id ASC
                """,
                (int(session_id), int(student_id)),
            )
            return [
                MarkAuditEntry(
                    audit_id=int(r["audit_id"]),
                    mark_id=int(r["mark_id"]),
                    old_status=MarkStatus(r["old_status"]),
                    new_status=MarkStatus(r["new_status"]),
                    edited_by=int(r["edited_by"]),
                    edited_at=r["edited_at"],
                    reason=r.get("reason"),
                )
                for r in fetchall(cur)
            ]

    def list_frequently_edited(self, *, min_edits: int) -> Sequence[FrequentlyEditedMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT m.session_id, m.student_id, e.full_name, m.edit_count
                FROM attendance_marks m
                JOIN student_enrollments e ON e.student_id = m.student_id
                WHERE m.edit_count > %s
                ORDER BY m.edit_count DESC, e.full_name ASC
                """,
                (int(min_edits),),
            )
            return [
                FrequentlyEditedMark(
                    session_id=int(r["session_id"]),
                    student_id=int(r["student_id"]),
                    full_name=r["full_name"],
                    edit_count=int(r["edit_count"]),
                )
                for r in fetchall(cur)
            ]
