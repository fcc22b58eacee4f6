from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from ..common.datetime_utils import now_local
from ..core.exceptions import AlreadyLockedError, NotFoundError, SessionLockedError, ValidationError
from ..enrollment.model import StudentEnrollment
from ..enrollment.repository import EnrollmentRepository
from ..timetable.model import TimetableSlot
from ..timetable.repository import TimetableRepository
from ..timetable.service import TimetableService
from .model import AttendanceSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DaySummary:
    total: int
    locked: int
    open: int


class SessionService:
    """Materializes timetable slots into dated sessions and owns the lock transition."""

    def __init__(
        self,
        sessions: SessionRepository,
        slots: TimetableRepository,
        enrollments: EnrollmentRepository,
        *,
        require_mark_to_lock: bool = False,
    ):
        self._sessions = sessions
        self._slots = slots
        self._enrollments = enrollments
        self._require_mark_to_lock = bool(require_mark_to_lock)

    def get_session(self, session_id: int) -> AttendanceSession:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFoundError("Attendance session not found")
        return session

    def get_slot(self, session: AttendanceSession) -> TimetableSlot:
        slot = self._slots.get_by_id(session.timetable_slot_id)
        if not slot:
            raise NotFoundError("Timetable slot not found")
        return slot

    def scoped_students(self, slot: TimetableSlot) -> List[StudentEnrollment]:
        """Whole class for theory, one batch for practical."""
        return list(self._enrollments.list_for_class(slot.class_id, batch_id=slot.batch_id))

    def ensure_session(self, timetable_slot_id: int, on: date) -> AttendanceSession:
        if not self._slots.get_by_id(timetable_slot_id):
            raise NotFoundError("Timetable slot not found")

        session, created = self._sessions.insert_or_get(timetable_slot_id=timetable_slot_id, session_date=on)
        if created:
            logger.info("session %s opened for slot %s on %s", session.session_id, timetable_slot_id, on)
        else:
            logger.debug("session %s reused for slot %s on %s", session.session_id, timetable_slot_id, on)
        return session

    def create_or_get_session(self, timetable_slot_id: int, on: date) -> int:
        return self.ensure_session(timetable_slot_id, on).session_id

    def ensure_sessions_for_date(self, on: date, *, faculty_id: Optional[int] = None) -> List[AttendanceSession]:
        """Open (or reuse) a session for every slot scheduled on the given date."""
        slots = TimetableService(self._slots).slots_for_date(on, faculty_id=faculty_id)
        return [self.ensure_session(slot.slot_id, on) for slot in slots]

    def lock_session(self, session_id: int, *, now: datetime | None = None) -> None:
        now = now or now_local()
        session = self.get_session(session_id)
        if session.locked:
            raise AlreadyLockedError("Attendance session is already locked")

        if self._require_mark_to_lock and self._sessions.count_marks(session_id) == 0:
            raise ValidationError("Mark at least one student before locking the session")

        if not self._sessions.lock(session_id=session_id, locked_at=now):
            # Another request locked it between the read and the update.
            raise AlreadyLockedError("Attendance session is already locked")
        logger.info("session %s locked", session_id)

    def delete_session(self, session_id: int, *, today: date | None = None) -> None:
        today = today or now_local().date()
        session = self.get_session(session_id)
        if session.locked:
            raise SessionLockedError("Locked sessions cannot be deleted")
        if session.session_date < today:
            raise ValidationError("Past sessions cannot be deleted")
        if self._sessions.count_marks(session_id) > 0:
            raise ValidationError("Session already has marks and cannot be deleted")

        if not self._sessions.delete_if_unused(session_id=session_id, not_before=today):
            raise ValidationError("Session changed while deleting; reload and try again")
        logger.info("session %s deleted", session_id)

    def day_summary(self, on: date) -> DaySummary:
        sessions = self._sessions.list_for_date(on)
        locked = sum(1 for s in sessions if s.locked)
        return DaySummary(total=len(sessions), locked=locked, open=len(sessions) - locked)
