from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from .model import LeaderboardEntry, LeaderboardGroup, RankedEntry


def _order_key(entry: LeaderboardEntry):
    return (-entry.percentage, -entry.attended, entry.student_name.casefold(), entry.student_name, entry.student_id)


def rank(entries: Iterable[LeaderboardEntry]) -> List[RankedEntry]:
    """Strict ordinal ranking: 1, 2, 3, ... with no shared rank numbers.

    Order: percentage desc, attended desc, student name asc (student_id as the
    last resort so equal names still sort the same way on every run).
    """
    ordered = sorted(entries, key=_order_key)
    return [
        RankedEntry(
            rank=position,
            student_id=e.student_id,
            student_name=e.student_name,
            attended=e.attended,
            total=e.total,
            percentage=e.percentage,
            batch_id=e.batch_id,
        )
        for position, e in enumerate(ordered, start=1)
    ]


def rank_by_batch(entries: Iterable[LeaderboardEntry]) -> List[LeaderboardGroup]:
    """One independent board per batch; batches ordered by id."""
    groups: Dict[Optional[int], List[LeaderboardEntry]] = defaultdict(list)
    for e in entries:
        groups[e.batch_id].append(e)

    ordered_keys = sorted(groups, key=lambda b: (b is not None, b or 0))
    return [LeaderboardGroup(batch_id=b, entries=rank(groups[b])) for b in ordered_keys]
