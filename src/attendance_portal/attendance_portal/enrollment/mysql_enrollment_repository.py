from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_int
from .model import StudentEnrollment
from .repository import EnrollmentRepository


def _to_enrollment(r: dict) -> StudentEnrollment:
    return StudentEnrollment(
        student_id=int(r["student_id"]),
        class_id=int(r["class_id"]),
        full_name=r["full_name"],
        batch_id=optional_int(r.get("batch_id")),
        roll_no=r.get("roll_no"),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_student(self, student_id: int) -> Optional[StudentEnrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, class_id, batch_id, full_name, roll_no, is_active
                FROM student_enrollments
                WHERE student_id=%s
                """,
                (int(student_id),),
            )
            r = fetchone(cur)
            return _to_enrollment(r) if r else None

    def list_for_class(self, class_id: int, *, batch_id: Optional[int] = None) -> Sequence[StudentEnrollment]:
        clauses = ["class_id=%s", "is_active=1"]
        params: list[object] = [int(class_id)]
        if batch_id is not None:
            clauses.append("batch_id=%s")
            params.append(int(batch_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT student_id, class_id, batch_id, full_name, roll_no, is_active
                FROM student_enrollments
                WHERE {where}
                ORDER BY roll_no ASC, student_id ASC
                """,
                tuple(params),
            )
            return [_to_enrollment(r) for r in fetchall(cur)]
