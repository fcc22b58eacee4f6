from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional


@dataclass(frozen=True)
class SlotDraft:
    """A slot being created or edited (no id yet)."""

    day_of_week: int
    start_time: time
    end_time: time
    class_id: int
    subject_id: int
    faculty_id: Optional[int] = None
    batch_id: Optional[int] = None

    @property
    def is_theory(self) -> bool:
        return self.batch_id is None


@dataclass(frozen=True)
class TimetableSlot:
    """Weekly recurring slot. batch_id None => theory slot for the whole class."""

    slot_id: int
    day_of_week: int
    start_time: time
    end_time: time
    class_id: int
    subject_id: int
    faculty_id: Optional[int] = None
    batch_id: Optional[int] = None

    @property
    def is_theory(self) -> bool:
        return self.batch_id is None

    @property
    def is_practical(self) -> bool:
        return self.batch_id is not None

    def to_draft(self) -> SlotDraft:
        return SlotDraft(
            day_of_week=self.day_of_week,
            start_time=self.start_time,
            end_time=self.end_time,
            class_id=self.class_id,
            subject_id=self.subject_id,
            faculty_id=self.faculty_id,
            batch_id=self.batch_id,
        )


@dataclass(frozen=True)
class SlotConflict:
    slot: TimetableSlot
    same_faculty: bool
    same_group: bool

    @property
    def reason(self) -> str:
        parts = []
        if self.same_faculty:
            parts.append("faculty already teaching")
        if self.same_group:
            parts.append("class/batch already occupied")
        return " and ".join(parts)
