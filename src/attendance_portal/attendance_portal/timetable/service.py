from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from ..common.datetime_utils import day_of_week
from ..common.validators import require_day_of_week, require_positive_id, require_time_range
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .conflicts import check_conflict
from .model import SlotConflict, SlotDraft, TimetableSlot
from .repository import TimetableRepository

logger = logging.getLogger(__name__)


class TimetableService:
    """Writes into the timetable, gated by the conflict checker."""

    def __init__(self, slots: TimetableRepository):
        self._slots = slots

    @staticmethod
    def _validate(draft: SlotDraft) -> SlotDraft:
        require_day_of_week(draft.day_of_week)
        require_positive_id(draft.class_id, "class_id")
        require_positive_id(draft.subject_id, "subject_id")
        if draft.faculty_id is not None:
            require_positive_id(draft.faculty_id, "faculty_id")
        if draft.batch_id is not None:
            require_positive_id(draft.batch_id, "batch_id")
        require_time_range(draft.start_time, draft.end_time)
        return draft

    def find_conflicts(self, draft: SlotDraft, *, ignore_slot_id: Optional[int] = None) -> List[SlotConflict]:
        existing = self._slots.list_for_day(draft.day_of_week)
        return check_conflict(draft, existing, ignore_slot_id=ignore_slot_id)

    def _raise_if_conflicting(self, draft: SlotDraft, *, ignore_slot_id: Optional[int] = None) -> None:
        conflicts = self.find_conflicts(draft, ignore_slot_id=ignore_slot_id)
        if conflicts:
            logger.warning(
                "slot rejected: day=%s %s-%s class=%s batch=%s conflicts with slots %s",
                draft.day_of_week,
                draft.start_time,
                draft.end_time,
                draft.class_id,
                draft.batch_id,
                [c.slot.slot_id for c in conflicts],
            )
            raise ConflictError("Timetable slot overlaps an existing slot", conflicts)

    def create_slot(self, draft: SlotDraft) -> int:
        self._raise_if_conflicting(self._validate(draft))
        slot_id = self._slots.create(draft)
        logger.info("slot %s created (class=%s subject=%s batch=%s)", slot_id, draft.class_id, draft.subject_id, draft.batch_id)
        return slot_id

    def update_slot(self, slot_id: int, draft: SlotDraft) -> None:
        """Edit a slot. Once sessions exist only its day, time and faculty may change."""
        current = self._slots.get_by_id(slot_id)
        if not current:
            raise NotFoundError("Timetable slot not found")
        regrouped = (current.class_id, current.batch_id, current.subject_id) != (
            draft.class_id,
            draft.batch_id,
            draft.subject_id,
        )
        if regrouped and self._slots.has_sessions(slot_id):
            raise ValidationError("Slot already has attendance sessions; class, batch and subject cannot change")
        self._raise_if_conflicting(self._validate(draft), ignore_slot_id=slot_id)
        self._slots.update(slot_id, draft)
        logger.info("slot %s updated", slot_id)

    def delete_slot(self, slot_id: int) -> None:
        if not self._slots.get_by_id(slot_id):
            raise NotFoundError("Timetable slot not found")
        if self._slots.has_sessions(slot_id):
            raise ValidationError("Slot already has attendance sessions and cannot be deleted")
        self._slots.delete(slot_id)
        logger.info("slot %s deleted", slot_id)

    def get_slot(self, slot_id: int) -> TimetableSlot:
        slot = self._slots.get_by_id(slot_id)
        if not slot:
            raise NotFoundError("Timetable slot not found")
        return slot

    def slots_for_date(self, on: date, *, faculty_id: Optional[int] = None) -> List[TimetableSlot]:
        """Slots that run on a calendar date, optionally for one faculty."""
        slots = self._slots.list_for_day(day_of_week(on))
        if faculty_id is not None:
            slots = [s for s in slots if s.faculty_id == faculty_id]
        return sorted(slots, key=lambda s: (s.start_time, s.slot_id))
