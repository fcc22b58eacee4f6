from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AchievementDefinition, parse_criteria
from .repository import AchievementRepository


def _to_definition(r: dict) -> AchievementDefinition:
    return AchievementDefinition(
        achievement_id=int(r["achievement_id"]),
        title=r["title"],
        criteria=parse_criteria(r.get("criteria")),
        description=r.get("description"),
        icon=r.get("icon"),
    )


class MySQLAchievementRepository(AchievementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[AchievementDefinition]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT achievement_id, title, description, icon, criteria FROM achievements ORDER BY achievement_id ASC"
            )
            return [_to_definition(r) for r in fetchall(cur)]

    def get_by_id(self, achievement_id: int) -> Optional[AchievementDefinition]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT achievement_id, title, description, icon, criteria FROM achievements WHERE achievement_id=%s",
                (int(achievement_id),),
            )
            r = fetchone(cur)
            return _to_definition(r) if r else None
