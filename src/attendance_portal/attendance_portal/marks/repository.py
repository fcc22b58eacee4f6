from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import MarkStatus
from .model import AttendanceMark, FrequentlyEditedMark, MarkAuditEntry


class MarkRepository(Protocol):
    def write_mark(
        self,
        *,
        session_id: int,
        student_id: int,
        status: MarkStatus,
        edited_by: int,
        edited_at: datetime,
        reason: Optional[str] = None,
    ) -> AttendanceMark:
        """Upsert a mark.

        The session's lock flag must be read inside the same transaction as
        the write; raises SessionLockedError when it is set and NotFoundError
        when the session does not exist. A changed status bumps edit_count and
        appends an audit entry.
        """

        raise NotImplementedError

    def get_mark(self, *, session_id: int, student_id: int) -> Optional[AttendanceMark]:
        raise NotImplementedError

    def list_for_session(self, session_id: int) -> Sequence[AttendanceMark]:
        raise NotImplementedError

    def list_audit(self, *, session_id: int, student_id: int) -> Sequence[MarkAuditEntry]:
        raise NotImplementedError

    def list_frequently_edited(self, *, min_edits: int) -> Sequence[FrequentlyEditedMark]:
        """Marks whose edit_count is strictly greater than min_edits."""

        raise NotImplementedError
