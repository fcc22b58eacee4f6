from src.attendance_portal.attendance_portal.reports.model import LeaderboardEntry
from src.attendance_portal.attendance_portal.reports.ranker import rank, rank_by_batch


def _entry(student_id, name, attended, total, batch_id=None):
    pct = 0 if total == 0 else round(100 * attended / total)
    return LeaderboardEntry(student_id, name, attended, total, pct, batch_id)


def test_orders_by_percentage_then_attended_then_name():
    entries = [
        _entry(1, "Zed", 8, 10),
        _entry(2, "Amy", 4, 5),
        _entry(3, "Bea", 9, 10),
        _entry(4, "Cal", 8, 10),
    ]

    ranked = rank(entries)

    assert [(r.rank, r.student_name) for r in ranked] == [(1, "Bea"), (2, "Cal"), (3, "Zed"), (4, "Amy")]


def test_ties_get_distinct_ordinal_ranks_deterministically():
    entries = [_entry(2, "bob", 3, 4), _entry(1, "Alice", 3, 4)]

    first = rank(entries)
    second = rank(list(reversed(entries)))

    assert [r.student_name for r in first] == ["Alice", "bob"]
    assert [r.rank for r in first] == [1, 2]
    assert first == second


def test_rank_by_batch_ranks_each_batch_independently():
    entries = [
        _entry(1, "Asha", 2, 4, batch_id=12),
        _entry(2, "Bilal", 4, 4, batch_id=11),
        _entry(3, "Chen", 3, 3, batch_id=12),
        _entry(4, "Dara", 1, 4, batch_id=11),
    ]

    groups = rank_by_batch(entries)

    assert [g.batch_id for g in groups] == [11, 12]
    assert [(r.rank, r.student_name) for r in groups[0].entries] == [(1, "Bilal"), (2, "Dara")]
    assert [(r.rank, r.student_name) for r in groups[1].entries] == [(1, "Chen"), (2, "Asha")]


def test_empty_input():
    assert rank([]) == []
    assert rank_by_batch([]) == []
