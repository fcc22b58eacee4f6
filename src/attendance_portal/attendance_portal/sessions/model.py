from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import SessionState


@dataclass(frozen=True)
class AttendanceSession:
    """A dated occurrence of a timetable slot. Natural key: (timetable_slot_id, session_date)."""

    session_id: int
    timetable_slot_id: int
    session_date: date
    locked: bool = False
    created_at: Optional[datetime] = None
    locked_at: Optional[datetime] = None

    @property
    def state(self) -> SessionState:
        return SessionState.LOCKED if self.locked else SessionState.OPEN
