from datetime import time

from src.attendance_portal.attendance_portal.timetable.conflicts import check_conflict, times_overlap
from src.attendance_portal.attendance_portal.timetable.model import SlotDraft, TimetableSlot


def _slot(slot_id, *, start, end, class_id=1, batch_id=None, faculty_id=None, day=1):
    return TimetableSlot(
        slot_id=slot_id,
        day_of_week=day,
        start_time=start,
        end_time=end,
        class_id=class_id,
        subject_id=1,
        faculty_id=faculty_id,
        batch_id=batch_id,
    )


def _draft(*, start, end, class_id=1, batch_id=None, faculty_id=None, day=1):
    return SlotDraft(
        day_of_week=day,
        start_time=start,
        end_time=end,
        class_id=class_id,
        subject_id=2,
        faculty_id=faculty_id,
        batch_id=batch_id,
    )


def test_theory_slot_blocks_practical_of_any_batch():
    theory = _slot(1, start=time(10, 0), end=time(11, 0), faculty_id=7)
    practical = _draft(start=time(10, 30), end=time(11, 30), batch_id=11, faculty_id=8)

    conflicts = check_conflict(practical, [theory])

    assert [c.slot.slot_id for c in conflicts] == [1]
    assert conflicts[0].same_group and not conflicts[0].same_faculty


def test_practicals_of_different_batches_can_run_together():
    b1 = _slot(1, start=time(10, 0), end=time(12, 0), batch_id=11, faculty_id=7)
    b2 = _draft(start=time(10, 0), end=time(12, 0), batch_id=12, faculty_id=8)

    assert check_conflict(b2, [b1]) == []


def test_same_batch_practicals_conflict():
    b1 = _slot(1, start=time(10, 0), end=time(12, 0), batch_id=11, faculty_id=7)
    again = _draft(start=time(11, 0), end=time(13, 0), batch_id=11, faculty_id=8)

    assert len(check_conflict(again, [b1])) == 1


def test_faculty_cannot_teach_two_classes_at_once():
    other_class = _slot(1, start=time(9, 0), end=time(10, 0), class_id=2, faculty_id=7)
    draft = _draft(start=time(9, 30), end=time(10, 30), class_id=1, faculty_id=7)

    conflicts = check_conflict(draft, [other_class])

    assert len(conflicts) == 1
    assert conflicts[0].same_faculty and not conflicts[0].same_group
    assert "faculty" in conflicts[0].reason


def test_back_to_back_slots_do_not_overlap():
    first = _slot(1, start=time(9, 0), end=time(10, 0), faculty_id=7)
    second = _draft(start=time(10, 0), end=time(11, 0), faculty_id=7)

    assert not times_overlap(first, second)
    assert check_conflict(second, [first]) == []


def test_other_day_and_ignored_slot_are_skipped():
    monday = _slot(1, start=time(9, 0), end=time(10, 0), faculty_id=7)
    tuesday_draft = _draft(start=time(9, 0), end=time(10, 0), faculty_id=7, day=2)
    monday_edit = _draft(start=time(9, 30), end=time(10, 30), faculty_id=7)

    assert check_conflict(tuesday_draft, [monday]) == []
    assert check_conflict(monday_edit, [monday], ignore_slot_id=1) == []


def test_missing_faculty_never_matches_another_missing_faculty():
    a = _slot(1, start=time(9, 0), end=time(10, 0), class_id=1)
    b = _draft(start=time(9, 0), end=time(10, 0), class_id=2)

    assert check_conflict(b, [a]) == []
