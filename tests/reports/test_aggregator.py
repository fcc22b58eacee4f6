from __future__ import annotations

from datetime import date, time

from src.attendance_portal.attendance_portal.core.enums import LectureType, MarkStatus
from src.attendance_portal.attendance_portal.enrollment.model import StudentEnrollment
from src.attendance_portal.attendance_portal.reports.aggregator import AttendanceAggregator
from src.attendance_portal.attendance_portal.reports.model import SessionFact, SubjectRef, percent

P, A = MarkStatus.PRESENT, MarkStatus.ABSENT


def _fact(session_id, *, day=2, subject_id=1, batch_id=None, locked=True, class_id=1):
    return SessionFact(
        session_id=session_id,
        timetable_slot_id=session_id,
        session_date=date(2026, 2, day),
        locked=locked,
        class_id=class_id,
        subject_id=subject_id,
        subject_name={1: "Maths", 2: "Physics"}.get(subject_id, "Other"),
        start_time=time(9, 0),
        end_time=time(10, 0),
        batch_id=batch_id,
    )


STUDENT = StudentEnrollment(student_id=7, class_id=1, full_name="Asha", batch_id=22)


def test_unlocked_sessions_are_ignored():
    facts = [_fact(1), _fact(2), _fact(3, locked=False)]
    marks = {(1, 7): P, (2, 7): A, (3, 7): P}

    summary = AttendanceAggregator().compute(STUDENT, facts, marks)

    assert (summary.attended, summary.total, summary.percentage) == (1, 2, 50)


def test_unmarked_locked_session_stays_in_denominator():
    facts = [_fact(1), _fact(2)]
    marks = {(1, 7): P}

    summary = AttendanceAggregator().compute(STUDENT, facts, marks)

    assert (summary.attended, summary.total) == (1, 2)


def test_other_batch_practicals_do_not_count():
    facts = [_fact(1), _fact(2, batch_id=21), _fact(3, batch_id=22), _fact(4, class_id=2)]
    marks = {(1, 7): P, (3, 7): P}

    agg = AttendanceAggregator()

    assert agg.compute(STUDENT, facts, marks).total == 2
    assert agg.compute(STUDENT, facts, marks, lecture_type=LectureType.PRACTICAL).total == 1
    assert agg.compute(STUDENT, facts, marks, lecture_type=LectureType.THEORY).total == 1


def test_overall_sums_sessions_instead_of_averaging_subjects():
    facts = [_fact(1, subject_id=1), _fact(2, subject_id=2), _fact(3, subject_id=2), _fact(4, subject_id=2)]
    marks = {(1, 7): P, (2, 7): P}

    agg = AttendanceAggregator()
    overall = agg.compute(STUDENT, facts, marks)
    subjects = agg.by_subject(STUDENT, facts, marks)

    assert [s.percentage for s in subjects] == [100, 33]
    assert (overall.attended, overall.total, overall.percentage) == (2, 4, 50)


def test_zero_sessions_is_zero_percent():
    summary = AttendanceAggregator().compute(STUDENT, [], {})

    assert (summary.attended, summary.total, summary.percentage) == (0, 0, 0)
    assert not summary.has_data


def test_subjects_without_sessions_are_listed_with_zero():
    refs = [SubjectRef(1, "Maths"), SubjectRef(3, "Chemistry Lab", batch_id=21), SubjectRef(4, "Biology Lab", batch_id=22)]

    rows = AttendanceAggregator().by_subject(STUDENT, [], {}, refs)

    assert [(r.subject_name, r.total) for r in rows] == [("Biology Lab", 0), ("Maths", 0)]


def test_history_reads_unmarked_locked_as_absent():
    facts = [_fact(1, day=2), _fact(2, day=3), _fact(3, day=4, locked=False)]
    marks = {(1, 7): P}

    rows = AttendanceAggregator().history(STUDENT, facts, marks)

    assert [(r.session_id, r.status) for r in rows] == [(3, "Not Marked"), (2, "Absent"), (1, "Present")]


def test_day_records_group_by_date():
    facts = [_fact(1, day=2), _fact(2, day=2), _fact(3, day=3), _fact(4, day=5, locked=False)]
    marks = {(1, 7): P, (2, 7): A, (3, 7): A}

    days = AttendanceAggregator().day_records(STUDENT, facts, marks)

    assert [(d.day.day, d.present, d.absent, d.is_absent_day) for d in days] == [(2, 1, 1, False), (3, 0, 1, True)]


def test_percent_rounds_halves_up():
    assert percent(1, 8) == 13
    assert percent(2, 3) == 67
    assert percent(1, 3) == 33
    assert percent(0, 0) == 0
