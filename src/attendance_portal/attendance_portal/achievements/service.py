from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from ..common.datetime_utils import now_local
from ..reports.model import StudentSnapshot
from ..reports.service import ReportService
from .factory import AchievementRuleFactory
from .model import AchievementDefinition, AchievementStatus, UnknownCriteria
from .repository import AchievementRepository

logger = logging.getLogger(__name__)


class AchievementService:
    """Evaluates achievement definitions against a student's attendance.

    Read-only: unlock state is recomputed on every call, so corrections to
    historical marks show up immediately.
    """

    def __init__(
        self,
        achievements: AchievementRepository,
        reports: ReportService,
        *,
        rule_factory: Optional[AchievementRuleFactory] = None,
    ):
        self._achievements = achievements
        self._reports = reports
        self._factory = rule_factory or AchievementRuleFactory()

    def evaluate(self, definition: AchievementDefinition, snapshot: StudentSnapshot, *, today: date) -> bool:
        if isinstance(definition.criteria, UnknownCriteria):
            logger.warning(
                "achievement %s cannot be evaluated (%s: %r); treated as locked",
                definition.achievement_id,
                definition.criteria.reason,
                definition.criteria.type,
            )
        rule = self._factory.for_criteria(definition.criteria)
        return bool(rule.is_unlocked(definition.criteria, snapshot, today=today))

    def get_achievement_status(self, student_id: int, *, today: date | None = None) -> List[AchievementStatus]:
        today = today or now_local().date()
        snapshot = self._reports.get_student_snapshot(student_id)
        return [
            AchievementStatus(
                achievement_id=d.achievement_id,
                title=d.title,
                unlocked=self.evaluate(d, snapshot, today=today),
            )
            for d in self._achievements.list_all()
        ]
