from __future__ import annotations

from typing import Iterable, List, Optional, Union

from .model import SlotConflict, SlotDraft, TimetableSlot

Slot = Union[SlotDraft, TimetableSlot]


def times_overlap(a: Slot, b: Slot) -> bool:
    """Half-open ranges [start, end): touching edges do not overlap."""
    return a.start_time < b.end_time and b.start_time < a.end_time


def shares_faculty(a: Slot, b: Slot) -> bool:
    return a.faculty_id is not None and a.faculty_id == b.faculty_id


def shares_group(a: Slot, b: Slot) -> bool:
    """Same class and the student populations intersect.

    A theory slot occupies every batch of the class; two practicals only
    collide when they are for the same batch.
    """
    if a.class_id != b.class_id:
        return False
    if a.batch_id is None or b.batch_id is None:
        return True
    return a.batch_id == b.batch_id


def check_conflict(
    candidate: SlotDraft,
    existing_slots: Iterable[TimetableSlot],
    *,
    ignore_slot_id: Optional[int] = None,
) -> List[SlotConflict]:
    """Return every existing slot the candidate collides with (empty list = free)."""
    conflicts: List[SlotConflict] = []
    for slot in existing_slots:
        if ignore_slot_id is not None and slot.slot_id == ignore_slot_id:
            continue
        if slot.day_of_week != candidate.day_of_week or not times_overlap(candidate, slot):
            continue

        same_faculty = shares_faculty(candidate, slot)
        same_group = shares_group(candidate, slot)
        if same_faculty or same_group:
            conflicts.append(SlotConflict(slot=slot, same_faculty=same_faculty, same_group=same_group))
    return conflicts
