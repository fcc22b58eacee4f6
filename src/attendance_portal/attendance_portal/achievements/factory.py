from __future__ import annotations

from dataclasses import dataclass

from .model import (
    AllSubjectsMin,
    Criteria,
    MaxAbsentDaysStreak,
    MinOverall,
    MinSubjectsAboveX,
    NoAbsentDays,
    PerfectSubject,
)
from .rules.absence_rules import MaxAbsentDaysStreakRule, NoAbsentDaysRule
from .rules.base import AchievementRule, LockedRule
from .rules.percentage_rules import AllSubjectsMinRule, MinOverallRule, MinSubjectsAboveXRule, PerfectSubjectRule


@dataclass
class AchievementRuleFactory:
    """Factory Pattern: pick the rule for a criteria variant; anything unknown stays locked."""

    def for_criteria(self, criteria: Criteria) -> AchievementRule:
        if isinstance(criteria, PerfectSubject):
            return PerfectSubjectRule()
        if isinstance(criteria, MinOverall):
            return MinOverallRule()
        if isinstance(criteria, NoAbsentDays):
            return NoAbsentDaysRule()
        if isinstance(criteria, AllSubjectsMin):
            return AllSubjectsMinRule()
        if isinstance(criteria, MinSubjectsAboveX):
            return MinSubjectsAboveXRule()
        if isinstance(criteria, MaxAbsentDaysStreak):
            return MaxAbsentDaysStreakRule()
        return LockedRule()
