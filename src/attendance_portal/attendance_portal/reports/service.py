from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_TREND_DAYS, DEFAULTER_THRESHOLD
from ..core.enums import LectureType, MarkStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..enrollment.model import StudentEnrollment
from ..enrollment.repository import EnrollmentRepository
from .aggregator import AttendanceAggregator
from .model import (
    AttendanceSummary,
    Defaulter,
    HistoryRow,
    LeaderboardEntry,
    LeaderboardGroup,
    MonthlySubjectRow,
    StudentSnapshot,
    SubjectAttendance,
    TrendPoint,
    percent,
)
from .ranker import rank, rank_by_batch
from .repository import ReportRepository

logger = logging.getLogger(__name__)


class ReportService:
    def __init__(
        self,
        reports: ReportRepository,
        enrollments: EnrollmentRepository,
        *,
        aggregator: Optional[AttendanceAggregator] = None,
        defaulter_threshold: int = DEFAULTER_THRESHOLD,
    ):
        self._reports = reports
        self._enrollments = enrollments
        self._aggregator = aggregator or AttendanceAggregator()
        self._defaulter_threshold = int(defaulter_threshold)

    def _enrollment(self, student_id: int) -> StudentEnrollment:
        enrollment = self._enrollments.get_by_student(int(student_id))
        if not enrollment:
            raise NotFoundError("Student not found")
        return enrollment

    def _student_data(self, enrollment: StudentEnrollment, *, subject_id: Optional[int] = None):
        facts = self._reports.list_class_sessions(enrollment.class_id, subject_id=subject_id)
        marks = self._reports.marks_for_sessions([f.session_id for f in facts], student_id=enrollment.student_id)
        return facts, marks

    def get_attendance(
        self,
        student_id: int,
        subject_id: Optional[int] = None,
        *,
        lecture_type: LectureType = LectureType.BOTH,
    ) -> AttendanceSummary:
        enrollment = self._enrollment(student_id)
        facts, marks = self._student_data(enrollment, subject_id=subject_id)
        summary = self._aggregator.compute(enrollment, facts, marks, subject_id=subject_id, lecture_type=lecture_type)
        logger.debug(
            "attendance student=%s subject=%s type=%s -> %s/%s",
            student_id,
            subject_id,
            lecture_type.value,
            summary.attended,
            summary.total,
        )
        return summary

    def get_subject_breakdown(self, student_id: int) -> List[SubjectAttendance]:
        enrollment = self._enrollment(student_id)
        facts, marks = self._student_data(enrollment)
        subjects = self._reports.list_class_subjects(enrollment.class_id)
        return self._aggregator.by_subject(enrollment, facts, marks, subjects)

    def get_history(self, student_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> List[HistoryRow]:
        enrollment = self._enrollment(student_id)
        facts, marks = self._student_data(enrollment)
        return self._aggregator.history(enrollment, facts, marks)[: int(limit)]

    def get_student_snapshot(self, student_id: int) -> StudentSnapshot:
        """Everything the achievement rules look at, read in one pass."""
        enrollment = self._enrollment(student_id)
        facts, marks = self._student_data(enrollment)
        subjects = self._reports.list_class_subjects(enrollment.class_id)
        return StudentSnapshot(
            enrollment=enrollment,
            overall=self._aggregator.compute(enrollment, facts, marks),
            subjects=self._aggregator.by_subject(enrollment, facts, marks, subjects),
            days=self._aggregator.day_records(enrollment, facts, marks),
        )

    def _class_entries(
        self,
        class_id: int,
        *,
        subject_id: Optional[int],
        lecture_type: LectureType,
    ) -> List[LeaderboardEntry]:
        students = self._enrollments.list_for_class(int(class_id))
        facts = self._reports.list_class_sessions(int(class_id), subject_id=subject_id)
        marks = self._reports.marks_for_sessions([f.session_id for f in facts if f.locked])

        entries: List[LeaderboardEntry] = []
        for student in students:
            if lecture_type == LectureType.PRACTICAL and student.batch_id is None:
                continue
            summary = self._aggregator.compute(student, facts, marks, subject_id=subject_id, lecture_type=lecture_type)
            entries.append(
                LeaderboardEntry(
                    student_id=student.student_id,
                    student_name=student.full_name,
                    attended=summary.attended,
                    total=summary.total,
                    percentage=summary.percentage,
                    batch_id=student.batch_id,
                )
            )
        return entries

    def get_leaderboard(
        self,
        class_id: int,
        subject_id: Optional[int] = None,
        lecture_type: LectureType = LectureType.BOTH,
    ) -> List[LeaderboardGroup]:
        """Ranked boards for a class.

        Practical boards are ranked per batch since batch populations have
        different denominators, and only batches with counted sessions get one;
        theory/both produce a single board.
        """
        try:
            lecture_type = LectureType(lecture_type)
        except ValueError:
            raise ValidationError(f"Unknown lecture type: {lecture_type!r}")

        entries = self._class_entries(class_id, subject_id=subject_id, lecture_type=lecture_type)
        if lecture_type == LectureType.PRACTICAL:
            # Batches that never had a locked practical in scope get no board.
            return [g for g in rank_by_batch(entries) if any(e.total > 0 for e in g.entries)]
        return [LeaderboardGroup(batch_id=None, entries=rank(entries))]

    def get_defaulters(self, class_id: int) -> List[Defaulter]:
        """Students with data whose overall percentage is below the policy threshold."""
        students = {s.student_id: s for s in self._enrollments.list_for_class(int(class_id))}
        out: List[Defaulter] = []
        for entry in self._class_entries(class_id, subject_id=None, lecture_type=LectureType.BOTH):
            if entry.total == 0 or entry.percentage >= self._defaulter_threshold:
                continue
            out.append(
                Defaulter(
                    student_id=entry.student_id,
                    full_name=entry.student_name,
                    roll_no=students[entry.student_id].roll_no,
                    attended=entry.attended,
                    total=entry.total,
                    percentage=entry.percentage,
                )
            )
        out.sort(key=lambda d: (d.percentage, d.full_name))
        return out

    def get_monthly_class_report(self, class_id: int, year: int, month: int) -> List[MonthlySubjectRow]:
        if not 1 <= int(month) <= 12:
            raise ValidationError("month must be between 1 and 12")

        facts = [
            f
            for f in self._reports.list_class_sessions(int(class_id))
            if f.locked and f.session_date.year == int(year) and f.session_date.month == int(month)
        ]
        marks = self._reports.marks_for_sessions([f.session_id for f in facts])
        present_by_session: Dict[int, int] = defaultdict(int)
        for (session_id, _), status in marks.items():
            if status == MarkStatus.PRESENT:
                present_by_session[session_id] += 1

        rows: Dict[int, MonthlySubjectRow] = {}
        for f in facts:
            row = rows.get(f.subject_id) or MonthlySubjectRow(f.subject_id, f.subject_name, 0, 0)
            rows[f.subject_id] = MonthlySubjectRow(
                subject_id=row.subject_id,
                subject_name=row.subject_name,
                total_sessions=row.total_sessions + 1,
                total_present=row.total_present + present_by_session[f.session_id],
            )
        return sorted(rows.values(), key=lambda r: (r.subject_name, r.subject_id))

    def get_attendance_trend(self, today: date | None = None, *, days: int = DEFAULT_TREND_DAYS) -> List[TrendPoint]:
        """Share of Present marks per date over the last ``days`` days, today included.

        Only locked sessions are read; dates without any are left out.
        """
        if int(days) < 1:
            raise ValidationError("days must be at least 1")
        today = today or now_local().date()
        start = today - timedelta(days=int(days) - 1)
        return [
            TrendPoint(day=c.day, present=c.present, marked=c.marked, percentage=percent(c.present, c.marked))
            for c in self._reports.daily_mark_counts(start, today)
        ]
