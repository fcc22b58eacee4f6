from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SlotDraft, TimetableSlot


class TimetableRepository(Protocol):
    def get_by_id(self, slot_id: int) -> Optional[TimetableSlot]:
        raise NotImplementedError

    def list_for_day(self, day_of_week: int) -> Sequence[TimetableSlot]:
        raise NotImplementedError

    def list_for_class(self, class_id: int) -> Sequence[TimetableSlot]:
        raise NotImplementedError

    def create(self, draft: SlotDraft) -> int:
        """Insert a slot and return slot_id."""

        raise NotImplementedError

    def update(self, slot_id: int, draft: SlotDraft) -> bool:
        raise NotImplementedError

    def delete(self, slot_id: int) -> bool:
        raise NotImplementedError

    def has_sessions(self, slot_id: int) -> bool:
        raise NotImplementedError
