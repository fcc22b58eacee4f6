from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..timetable.model import TimetableSlot


@dataclass(frozen=True)
class StudentEnrollment:
    student_id: int
    class_id: int
    full_name: str
    batch_id: Optional[int] = None
    roll_no: Optional[str] = None
    is_active: bool = True

    def attends(self, slot: TimetableSlot) -> bool:
        """Whether sessions of this slot belong to the student's population.

        Theory slots count for the whole class; practical slots only for the
        matching batch.
        """
        if not self.is_active or self.class_id != slot.class_id:
            return False
        return slot.batch_id is None or slot.batch_id == self.batch_id
