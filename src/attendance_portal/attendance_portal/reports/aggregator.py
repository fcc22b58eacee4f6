from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..core.enums import LectureType, MarkStatus
from ..enrollment.model import StudentEnrollment
from .model import AttendanceSummary, DayRecord, HistoryRow, SessionFact, SubjectAttendance, SubjectRef, percent

Marks = Mapping[Tuple[int, int], MarkStatus]


def in_population(fact: SessionFact, enrollment: StudentEnrollment) -> bool:
    """Theory sessions count for the whole class, practical ones for the matching batch only."""
    if fact.class_id != enrollment.class_id:
        return False
    return fact.batch_id is None or fact.batch_id == enrollment.batch_id


def matches_lecture_type(fact: SessionFact, lecture_type: LectureType) -> bool:
    if lecture_type == LectureType.THEORY:
        return fact.is_theory
    if lecture_type == LectureType.PRACTICAL:
        return not fact.is_theory
    return True


class AttendanceAggregator:
    """Turns raw marks into attended/total counts.

    Counting rules:
    - only locked sessions are authoritative; open sessions never count;
    - a session counts toward a student's total when it is in the student's
      population (see ``in_population``);
    - a student without a mark in a counted session stays in the total and is
      not attended (unmarked is never excluded from the denominator);
    - overall figures sum attended/total over the whole session set rather
      than averaging per-subject percentages.
    """

    def relevant_sessions(
        self,
        facts: Iterable[SessionFact],
        enrollment: StudentEnrollment,
        *,
        subject_id: Optional[int] = None,
        lecture_type: LectureType = LectureType.BOTH,
    ) -> List[SessionFact]:
        return [
            f
            for f in facts
            if f.locked
            and in_population(f, enrollment)
            and (subject_id is None or f.subject_id == subject_id)
            and matches_lecture_type(f, lecture_type)
        ]

    @staticmethod
    def effective_status(fact: SessionFact, student_id: int, marks: Marks) -> MarkStatus:
        """Stored status, except that unmarked in a locked session reads as absent."""
        status = marks.get((fact.session_id, student_id), MarkStatus.UNMARKED)
        if status == MarkStatus.UNMARKED and fact.locked:
            return MarkStatus.ABSENT
        return status

    def compute(
        self,
        enrollment: StudentEnrollment,
        facts: Iterable[SessionFact],
        marks: Marks,
        *,
        subject_id: Optional[int] = None,
        lecture_type: LectureType = LectureType.BOTH,
    ) -> AttendanceSummary:
        sessions = self.relevant_sessions(facts, enrollment, subject_id=subject_id, lecture_type=lecture_type)
        attended = sum(1 for f in sessions if marks.get((f.session_id, enrollment.student_id)) == MarkStatus.PRESENT)
        return AttendanceSummary.of(attended, len(sessions))

    def by_subject(
        self,
        enrollment: StudentEnrollment,
        facts: Iterable[SessionFact],
        marks: Marks,
        subjects: Sequence[SubjectRef] = (),
    ) -> List[SubjectAttendance]:
        """Per-subject figures; subjects known from the timetable but without sessions report 0/0."""
        names: Dict[int, str] = {}
        for ref in subjects:
            if ref.batch_id is None or ref.batch_id == enrollment.batch_id:
                names.setdefault(ref.subject_id, ref.subject_name)

        attended: Dict[int, int] = defaultdict(int)
        total: Dict[int, int] = defaultdict(int)
        for f in self.relevant_sessions(facts, enrollment):
            names.setdefault(f.subject_id, f.subject_name)
            total[f.subject_id] += 1
            if marks.get((f.session_id, enrollment.student_id)) == MarkStatus.PRESENT:
                attended[f.subject_id] += 1

        rows = [
            SubjectAttendance(
                subject_id=subject_id,
                subject_name=name,
                attended=attended[subject_id],
                total=total[subject_id],
                percentage=percent(attended[subject_id], total[subject_id]),
            )
            for subject_id, name in names.items()
        ]
        rows.sort(key=lambda r: (r.subject_name, r.subject_id))
        return rows

    def history(self, enrollment: StudentEnrollment, facts: Iterable[SessionFact], marks: Marks) -> List[HistoryRow]:
        """Open and locked sessions of the student's population, newest first."""
        rows = [
            HistoryRow(
                session_id=f.session_id,
                session_date=f.session_date,
                subject_name=f.subject_name,
                start_time=f.start_time,
                end_time=f.end_time,
                status=self.effective_status(f, enrollment.student_id, marks).label,
            )
            for f in facts
            if in_population(f, enrollment)
        ]
        rows.sort(key=lambda r: (r.session_date, r.start_time, r.session_id), reverse=True)
        return rows

    def day_records(self, enrollment: StudentEnrollment, facts: Iterable[SessionFact], marks: Marks) -> List[DayRecord]:
        """Present/absent counts per calendar day over locked sessions, oldest first."""
        present: Dict = defaultdict(int)
        absent: Dict = defaultdict(int)
        for f in self.relevant_sessions(facts, enrollment):
            status = self.effective_status(f, enrollment.student_id, marks)
            if status == MarkStatus.PRESENT:
                present[f.session_date] += 1
            else:
                absent[f.session_date] += 1

        days = sorted(set(present) | set(absent))
        return [DayRecord(day=d, present=present[d], absent=absent[d]) for d in days]
