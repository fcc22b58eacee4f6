from __future__ import annotations

from datetime import date
from typing import List, Optional

from .achievements.model import AchievementStatus
from .achievements.service import AchievementService
from .core.enums import LectureType
from .marks.model import AttendanceMark, MarkResult
from .marks.service import MarkLedger
from .reports.model import AttendanceSummary, LeaderboardGroup
from .reports.service import ReportService
from .sessions.service import SessionService


class AttendanceEngine:
    """Entry points consumed by the request layer.

    Errors propagate as ``core.exceptions`` types. Reads over a student or
    class with no locked sessions return zero counts rather than failing.
    """

    def __init__(
        self,
        sessions: SessionService,
        ledger: MarkLedger,
        reports: ReportService,
        achievements: AchievementService,
    ):
        self._sessions = sessions
        self._ledger = ledger
        self._reports = reports
        self._achievements = achievements

    def create_or_get_session(self, timetable_slot_id: int, session_date: date) -> int:
        return self._sessions.create_or_get_session(timetable_slot_id, session_date)

    def lock_session(self, session_id: int) -> None:
        self._sessions.lock_session(session_id)

    def set_mark(self, session_id: int, student_id: int, status, *, edited_by: int, reason: Optional[str] = None) -> AttendanceMark:
        return self._ledger.set_mark(session_id, student_id, status, edited_by=edited_by, reason=reason)

    def bulk_set(self, session_id: int, status, *, edited_by: int) -> List[MarkResult]:
        return self._ledger.bulk_set(session_id, status, edited_by=edited_by)

    def get_attendance(self, student_id: int, subject_id: Optional[int] = None) -> AttendanceSummary:
        return self._reports.get_attendance(student_id, subject_id)

    def get_leaderboard(
        self,
        class_id: int,
        subject_id: Optional[int] = None,
        lecture_type: LectureType = LectureType.BOTH,
    ) -> List[LeaderboardGroup]:
        return self._reports.get_leaderboard(class_id, subject_id, lecture_type)

    def get_achievement_status(self, student_id: int) -> List[AchievementStatus]:
        return self._achievements.get_achievement_status(student_id)
