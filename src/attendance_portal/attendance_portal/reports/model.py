from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import List, Optional

from ..enrollment.model import StudentEnrollment


@dataclass(frozen=True)
class SessionFact:
    """Read-model: a session joined with the slot that produced it."""

    session_id: int
    timetable_slot_id: int
    session_date: date
    locked: bool
    class_id: int
    subject_id: int
    subject_name: str
    start_time: time
    end_time: time
    batch_id: Optional[int] = None

    @property
    def is_theory(self) -> bool:
        return self.batch_id is None


@dataclass(frozen=True)
class SubjectRef:
    """A subject taught to a class, per batch for practicals (batch_id None = theory)."""

    subject_id: int
    subject_name: str
    batch_id: Optional[int] = None


def percent(attended: int, total: int) -> int:
    """Whole percent, halves rounded up; 0 when there is nothing to count."""
    if total <= 0:
        return 0
    return (200 * attended + total) // (2 * total)


@dataclass(frozen=True)
class AttendanceSummary:
    attended: int
    total: int
    percentage: int

    @classmethod
    def of(cls, attended: int, total: int) -> "AttendanceSummary":
        return cls(attended=attended, total=total, percentage=percent(attended, total))

    @property
    def has_data(self) -> bool:
        return self.total > 0


@dataclass(frozen=True)
class SubjectAttendance:
    subject_id: int
    subject_name: str
    attended: int
    total: int
    percentage: int


@dataclass(frozen=True)
class HistoryRow:
    session_id: int
    session_date: date
    subject_name: str
    start_time: time
    end_time: time
    status: str


@dataclass(frozen=True)
class DayRecord:
    """Marks of one calendar day across the student's locked sessions."""

    day: date
    present: int = 0
    absent: int = 0

    @property
    def is_absent_day(self) -> bool:
        return self.absent > 0 and self.present == 0


@dataclass(frozen=True)
class StudentSnapshot:
    enrollment: StudentEnrollment
    overall: AttendanceSummary
    subjects: List[SubjectAttendance] = field(default_factory=list)
    days: List[DayRecord] = field(default_factory=list)


@dataclass(frozen=True)
class LeaderboardEntry:
    student_id: int
    student_name: str
    attended: int
    total: int
    percentage: int
    batch_id: Optional[int] = None


@dataclass(frozen=True)
class RankedEntry:
    rank: int
    student_id: int
    student_name: str
    attended: int
    total: int
    percentage: int
    batch_id: Optional[int] = None


@dataclass(frozen=True)
class LeaderboardGroup:
    """One independently ranked board; batch_id is set only for practical boards."""

    batch_id: Optional[int]
    entries: List[RankedEntry]


@dataclass(frozen=True)
class Defaulter:
    student_id: int
    full_name: str
    roll_no: Optional[str]
    attended: int
    total: int
    percentage: int


@dataclass(frozen=True)
class MonthlySubjectRow:
    subject_id: int
    subject_name: str
    total_sessions: int
    total_present: int


@dataclass(frozen=True)
class DailyMarkCount:
    """Mark rows of the locked sessions held on one date."""

    day: date
    present: int
    marked: int


@dataclass(frozen=True)
class TrendPoint:
    day: date
    present: int
    marked: int
    percentage: int
