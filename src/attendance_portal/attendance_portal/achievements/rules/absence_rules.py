from __future__ import annotations

from datetime import date, timedelta

from ...reports.model import StudentSnapshot
from ..model import MaxAbsentDaysStreak, NoAbsentDays
from .base import AchievementRule


class NoAbsentDaysRule(AchievementRule):
    """No absent mark on any session day within the last ``value`` calendar days (today included)."""

    def is_unlocked(self, criteria: NoAbsentDays, snapshot: StudentSnapshot, *, today: date) -> bool:
        window_start = today - timedelta(days=criteria.value)
        return not any(window_start < d.day <= today and d.absent > 0 for d in snapshot.days)


def longest_absent_streak(snapshot: StudentSnapshot) -> int:
    """Longest run of consecutive session days that are absent-only.

    Days without sessions neither extend nor break a run; a day with any
    present mark breaks it.
    """
    longest = current = 0
    for record in sorted(snapshot.days, key=lambda d: d.day):
        if record.is_absent_day:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


class MaxAbsentDaysStreakRule(AchievementRule):
    def is_unlocked(self, criteria: MaxAbsentDaysStreak, snapshot: StudentSnapshot, *, today: date) -> bool:
        return longest_absent_streak(snapshot) <= criteria.value
