from __future__ import annotations

from datetime import date

from ...reports.model import StudentSnapshot
from ..model import AllSubjectsMin, MinOverall, MinSubjectsAboveX
from .base import AchievementRule


def _subjects_with_data(snapshot: StudentSnapshot):
    return [s for s in snapshot.subjects if s.total > 0]


class PerfectSubjectRule(AchievementRule):
    def is_unlocked(self, criteria, snapshot: StudentSnapshot, *, today: date) -> bool:
        return any(s.percentage == 100 for s in _subjects_with_data(snapshot))


class MinOverallRule(AchievementRule):
    def is_unlocked(self, criteria: MinOverall, snapshot: StudentSnapshot, *, today: date) -> bool:
        return snapshot.overall.percentage >= criteria.value


class AllSubjectsMinRule(AchievementRule):
    """Every subject that has sessions is at or above the threshold."""

    def is_unlocked(self, criteria: AllSubjectsMin, snapshot: StudentSnapshot, *, today: date) -> bool:
        return all(s.percentage >= criteria.value for s in _subjects_with_data(snapshot))


class MinSubjectsAboveXRule(AchievementRule):
    def is_unlocked(self, criteria: MinSubjectsAboveX, snapshot: StudentSnapshot, *, today: date) -> bool:
        matching = sum(1 for s in _subjects_with_data(snapshot) if s.percentage >= criteria.percentage)
        return matching >= criteria.count
