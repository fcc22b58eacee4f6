from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Protocol, Sequence, Tuple

from ..core.enums import MarkStatus
from .model import DailyMarkCount, SessionFact, SubjectRef


class ReportRepository(Protocol):
    def list_class_sessions(self, class_id: int, *, subject_id: Optional[int] = None) -> Sequence[SessionFact]:
        """Every session (open or locked) generated from the class's slots."""

        raise NotImplementedError

    def marks_for_sessions(
        self,
        session_ids: Sequence[int],
        *,
        student_id: Optional[int] = None,
    ) -> Dict[Tuple[int, int], MarkStatus]:
        """Map (session_id, student_id) -> status for existing mark rows."""

        raise NotImplementedError

    def list_class_subjects(self, class_id: int) -> Sequence[SubjectRef]:
        raise NotImplementedError

    def daily_mark_counts(self, start: date, end: date) -> Sequence[DailyMarkCount]:
        """Per date in [start, end] with at least one locked session, oldest first."""

        raise NotImplementedError
