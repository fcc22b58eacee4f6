from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from ...reports.model import StudentSnapshot
from ..model import Criteria


class AchievementRule(ABC):
    """Strategy Pattern: one evaluation function per criteria variant."""

    @abstractmethod
    def is_unlocked(self, criteria: Criteria, snapshot: StudentSnapshot, *, today: date) -> bool:
        raise NotImplementedError


class LockedRule(AchievementRule):
    """Fallback for criteria the engine does not understand."""

    def is_unlocked(self, criteria: Criteria, snapshot: StudentSnapshot, *, today: date) -> bool:
        return False
