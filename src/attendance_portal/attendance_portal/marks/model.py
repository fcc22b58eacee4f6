from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import MarkStatus


@dataclass(frozen=True)
class AttendanceMark:
    """One row per (session, student). Students without a row are implicitly unmarked."""

    mark_id: int
    session_id: int
    student_id: int
    status: MarkStatus
    edited_by: int
    edited_at: datetime
    edit_count: int = 0


@dataclass(frozen=True)
class MarkAuditEntry:
    audit_id: int
    mark_id: int
    old_status: MarkStatus
    new_status: MarkStatus
    edited_by: int
    edited_at: datetime
    reason: Optional[str] = None


@dataclass(frozen=True)
class MarkResult:
    """Per-student outcome of a bulk write."""

    student_id: int
    ok: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class RosterEntry:
    student_id: int
    full_name: str
    roll_no: Optional[str]
    batch_id: Optional[int]
    status: MarkStatus


@dataclass(frozen=True)
class FrequentlyEditedMark:
    session_id: int
    student_id: int
    full_name: str
    edit_count: int
