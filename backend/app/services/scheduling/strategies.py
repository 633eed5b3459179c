"""Placement strategies keyed on the user's procrastination profile."""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List

from app.services.scheduling.models import ProcrastinatorType, Profile


class StrategyName(str, Enum):
    BALANCED = "balanced"
    DISTRIBUTED = "distributed"
    INTENSIVE = "intensive"
    DEADLINE_PROXIMATE = "deadline-proximate"


@dataclass(frozen=True)
class PlacementStrategy:
    """Day iteration order plus a per-day chunk cap."""

    name: StrategyName
    day_order: Callable[[int, int], List[int]]
    max_chunks_per_day: Callable[[int, int], int]


def _forward(start_index: int, end_index: int) -> List[int]:
    return list(range(start_index, end_index + 1))


def _backward(start_index: int, end_index: int) -> List[int]:
    return list(range(end_index, start_index - 1, -1))


def _balanced_cap(chunk_count: int, days_available: int) -> int:
    return max(1, math.ceil(chunk_count / days_available))


def _distributed_cap(chunk_count: int, days_available: int) -> int:
    return math.ceil(chunk_count / days_available)


def _intensive_cap(chunk_count: int, days_available: int) -> int:
    return max(2, math.ceil(chunk_count / max(1, days_available // 2)))


def _deadline_proximate_cap(chunk_count: int, days_available: int) -> int:
    return max(2, math.ceil(chunk_count / max(1, days_available - 2)))


STRATEGIES: Dict[StrategyName, PlacementStrategy] = {
    StrategyName.BALANCED: PlacementStrategy(StrategyName.BALANCED, _forward, _balanced_cap),
    StrategyName.DISTRIBUTED: PlacementStrategy(StrategyName.DISTRIBUTED, _forward, _distributed_cap),
    StrategyName.INTENSIVE: PlacementStrategy(StrategyName.INTENSIVE, _forward, _intensive_cap),
    StrategyName.DEADLINE_PROXIMATE: PlacementStrategy(
        StrategyName.DEADLINE_PROXIMATE, _backward, _deadline_proximate_cap
    ),
}

_TYPE_TO_STRATEGY: Dict[ProcrastinatorType, StrategyName] = {
    ProcrastinatorType.PERFECTIONIST: StrategyName.DISTRIBUTED,
    ProcrastinatorType.OVERWHELMED: StrategyName.DISTRIBUTED,
    ProcrastinatorType.AVOIDANT: StrategyName.DISTRIBUTED,
    ProcrastinatorType.LACK_OF_MOTIVATION: StrategyName.INTENSIVE,
    ProcrastinatorType.DISTRACTION: StrategyName.INTENSIVE,
    ProcrastinatorType.DEADLINE_DRIVEN: StrategyName.DEADLINE_PROXIMATE,
}


def select_strategy(profile: Profile) -> PlacementStrategy:
    if not profile.is_procrastinator or profile.procrastinator_type is None:
        return STRATEGIES[StrategyName.BALANCED]
    return STRATEGIES[_TYPE_TO_STRATEGY[profile.procrastinator_type]]
