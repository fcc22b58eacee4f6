from __future__ import annotations

from enum import Enum


class MarkStatus(str, Enum):
    """Per-student mark stored in attendance_marks.status."""

    PRESENT = "P"
    ABSENT = "A"
    UNMARKED = "U"

    @property
    def label(self) -> str:
        return {
            MarkStatus.PRESENT: "Present",
            MarkStatus.ABSENT: "Absent",
            MarkStatus.UNMARKED: "Not Marked",
        }[self]


class SessionState(str, Enum):
    """Lifecycle of an attendance session. LOCKED is terminal."""

    NONE = "NONE"
    OPEN = "OPEN"
    LOCKED = "LOCKED"


class LectureType(str, Enum):
    THEORY = "theory"
    PRACTICAL = "practical"
    BOTH = "both"
