from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_positive_id
from ..core.constants import EDIT_ABUSE_THRESHOLD
from ..core.enums import MarkStatus
from ..core.exceptions import NotEnrolledError, NotFoundError, SessionLockedError, ValidationError
from ..enrollment.repository import EnrollmentRepository
from ..sessions.model import AttendanceSession
from ..sessions.service import SessionService
from ..timetable.model import TimetableSlot
from .model import AttendanceMark, FrequentlyEditedMark, MarkAuditEntry, MarkResult, RosterEntry
from .repository import MarkRepository

logger = logging.getLogger(__name__)

_STATUS_ALIASES = {
    "p": MarkStatus.PRESENT,
    "present": MarkStatus.PRESENT,
    "a": MarkStatus.ABSENT,
    "absent": MarkStatus.ABSENT,
    "u": MarkStatus.UNMARKED,
    "unmarked": MarkStatus.UNMARKED,
}


def coerce_status(value) -> MarkStatus:
    if isinstance(value, MarkStatus):
        return value
    status = _STATUS_ALIASES.get(str(value or "").strip().lower())
    if status is None:
        raise ValidationError(f"Unknown attendance status: {value!r}")
    return status


class MarkLedger:
    """Per-student P/A marks inside a session; refuses writes once the session is locked."""

    def __init__(
        self,
        marks: MarkRepository,
        enrollments: EnrollmentRepository,
        sessions: SessionService,
        *,
        edit_abuse_threshold: int = EDIT_ABUSE_THRESHOLD,
    ):
        self._marks = marks
        self._enrollments = enrollments
        self._sessions = sessions
        self._edit_abuse_threshold = int(edit_abuse_threshold)

    def _write(
        self,
        session: AttendanceSession,
        slot: TimetableSlot,
        student_id: int,
        status: MarkStatus,
        *,
        edited_by: int,
        now: datetime,
        reason: Optional[str],
    ) -> AttendanceMark:
        enrollment = self._enrollments.get_by_student(student_id)
        if not enrollment:
            raise NotFoundError("Student not found")
        if not enrollment.attends(slot):
            logger.warning("mark rejected: student %s is not in the population of session %s", student_id, session.session_id)
            raise NotEnrolledError("Student is not part of this session")

        try:
            return self._marks.write_mark(
                session_id=session.session_id,
                student_id=student_id,
                status=status,
                edited_by=edited_by,
                edited_at=now,
                reason=reason,
            )
        except SessionLockedError:
            logger.warning("mark rejected: session %s is locked (student %s)", session.session_id, student_id)
            raise

    def set_mark(
        self,
        session_id: int,
        student_id: int,
        status,
        *,
        edited_by: int,
        reason: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceMark:
        status = coerce_status(status)
        edited_by = require_positive_id(edited_by, "edited_by")
        session = self._sessions.get_session(session_id)
        if session.locked:
            logger.warning("mark rejected: session %s is locked (student %s)", session_id, student_id)
            raise SessionLockedError("Attendance session is locked")

        slot = self._sessions.get_slot(session)
        reason = (reason or "").strip() or None
        return self._write(session, slot, int(student_id), status, edited_by=edited_by, now=now or now_local(), reason=reason)

    def bulk_set(self, session_id: int, status, *, edited_by: int, now: datetime | None = None) -> List[MarkResult]:
        """Mark every scoped student with the same status.

        Best effort: failures for one student do not undo the others, and each
        student gets a MarkResult so the caller can show what failed.
        """
        status = coerce_status(status)
        edited_by = require_positive_id(edited_by, "edited_by")
        now = now or now_local()
        session = self._sessions.get_session(session_id)
        slot = self._sessions.get_slot(session)

        results: List[MarkResult] = []
        for student in self._sessions.scoped_students(slot):
            try:
                self._write(session, slot, student.student_id, status, edited_by=edited_by, now=now, reason=None)
                results.append(MarkResult(student_id=student.student_id, ok=True))
            except (SessionLockedError, NotEnrolledError, NotFoundError) as e:
                results.append(MarkResult(student_id=student.student_id, ok=False, error=str(e)))

        failed = sum(1 for r in results if not r.ok)
        logger.info("bulk mark %s on session %s: %d ok, %d failed", status.value, session_id, len(results) - failed, failed)
        return results

    def get_roster(self, session_id: int) -> List[RosterEntry]:
        """Scoped students of a session with their current status, ordered by roll number."""
        session = self._sessions.get_session(session_id)
        slot = self._sessions.get_slot(session)
        by_student = {m.student_id: m.status for m in self._marks.list_for_session(session_id)}
        return [
            RosterEntry(
                student_id=s.student_id,
                full_name=s.full_name,
                roll_no=s.roll_no,
                batch_id=s.batch_id,
                status=by_student.get(s.student_id, MarkStatus.UNMARKED),
            )
            for s in self._sessions.scoped_students(slot)
        ]

    def get_audit_trail(self, session_id: int, student_id: int) -> Sequence[MarkAuditEntry]:
        return self._marks.list_audit(session_id=int(session_id), student_id=int(student_id))

    def list_frequently_edited(self) -> Sequence[FrequentlyEditedMark]:
        return self._marks.list_frequently_edited(min_edits=self._edit_abuse_threshold)
