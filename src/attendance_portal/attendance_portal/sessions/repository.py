from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence, Tuple

from .model import AttendanceSession


class SessionRepository(Protocol):
    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def get_for_slot_and_date(self, *, timetable_slot_id: int, session_date: date) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def insert_or_get(self, *, timetable_slot_id: int, session_date: date) -> Tuple[AttendanceSession, bool]:
        """Insert the session unless the (slot, date) key exists.

        Must rely on the uniqueness constraint, not a prior read.
        Returns (session, created).
        """

        raise NotImplementedError

    def lock(self, *, session_id: int, locked_at: datetime) -> bool:
        """OPEN -> LOCKED. Returns False when the session was not open."""

        raise NotImplementedError

    def delete_if_unused(self, *, session_id: int, not_before: date) -> bool:
        """Delete an open, unmarked session dated on/after not_before."""

        raise NotImplementedError

    def count_marks(self, session_id: int) -> int:
        raise NotImplementedError

    def list_for_date(self, session_date: date) -> Sequence[AttendanceSession]:
        raise NotImplementedError
