from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from ..core.exceptions import InvalidCriteriaError


@dataclass(frozen=True)
class PerfectSubject:
    """100% in at least one subject that has sessions."""


@dataclass(frozen=True)
class MinOverall:
    value: float


@dataclass(frozen=True)
class NoAbsentDays:
    value: int


@dataclass(frozen=True)
class AllSubjectsMin:
    value: float


@dataclass(frozen=True)
class MinSubjectsAboveX:
    percentage: float
    count: int


@dataclass(frozen=True)
class MaxAbsentDaysStreak:
    value: int


@dataclass(frozen=True)
class UnknownCriteria:
    """Anything the engine cannot evaluate; always reads as locked."""

    type: str
    payload: Mapping[str, Any] = field(default_factory=dict)
    reason: str = "unknown criteria type"


Criteria = Union[
    PerfectSubject,
    MinOverall,
    NoAbsentDays,
    AllSubjectsMin,
    MinSubjectsAboveX,
    MaxAbsentDaysStreak,
    UnknownCriteria,
]


def _number(payload: Mapping[str, Any], key: str) -> float:
    value = payload.get(key)
    if isinstance(value, bool) or value is None:
        raise ValueError(f"{key} is required")
    number = float(value)
    if number < 0:
        raise ValueError(f"{key} must not be negative")
    return number


def _whole(payload: Mapping[str, Any], key: str) -> int:
    number = _number(payload, key)
    if number != int(number):
        raise ValueError(f"{key} must be a whole number")
    return int(number)


_PARSERS = {
    "perfect_subject": lambda p: PerfectSubject(),
    "min_overall": lambda p: MinOverall(value=_number(p, "value")),
    "no_absent_days": lambda p: NoAbsentDays(value=_whole(p, "value")),
    "all_subjects_min": lambda p: AllSubjectsMin(value=_number(p, "value")),
    "min_subjects_above_x": lambda p: MinSubjectsAboveX(percentage=_number(p, "percentage"), count=_whole(p, "count")),
    "max_absent_days_streak": lambda p: MaxAbsentDaysStreak(value=_whole(p, "value")),
}


def parse_criteria(raw: Union[str, Mapping[str, Any], None], *, strict: bool = False) -> Criteria:
    """Turn an admin-authored criteria payload into a closed criteria variant.

    Accepts a dict or its JSON text. Unrecognized types and malformed
    parameters become UnknownCriteria, or raise InvalidCriteriaError when
    ``strict`` is set.
    """
    try:
        payload = json.loads(raw) if isinstance(raw, (str, bytes, bytearray)) else raw
    except ValueError:
        payload = None

    if not isinstance(payload, Mapping):
        if strict:
            raise InvalidCriteriaError("criteria must be an object")
        return UnknownCriteria(type="", reason="criteria must be an object")

    kind = str(payload.get("type") or "")
    parser = _PARSERS.get(kind)
    if parser is None:
        if strict:
            raise InvalidCriteriaError(f"unknown criteria type: {kind!r}")
        return UnknownCriteria(type=kind, payload=dict(payload))

    try:
        return parser(payload)
    except (TypeError, ValueError) as e:
        if strict:
            raise InvalidCriteriaError(f"invalid {kind} criteria: {e}")
        return UnknownCriteria(type=kind, payload=dict(payload), reason=str(e))


@dataclass(frozen=True)
class AchievementDefinition:
    achievement_id: int
    title: str
    criteria: Criteria
    description: Optional[str] = None
    icon: Optional[str] = None


@dataclass(frozen=True)
class AchievementStatus:
    """Derived on every read, never stored."""

    achievement_id: int
    title: str
    unlocked: bool
