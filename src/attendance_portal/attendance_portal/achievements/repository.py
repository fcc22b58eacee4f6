from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AchievementDefinition


class AchievementRepository(Protocol):
    def list_all(self) -> Sequence[AchievementDefinition]:
        raise NotImplementedError

    def get_by_id(self, achievement_id: int) -> Optional[AchievementDefinition]:
        raise NotImplementedError
