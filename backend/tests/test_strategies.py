from __future__ import annotations

import pytest

from app.services.scheduling.models import ProcrastinatorType, Profile
from app.services.scheduling.strategies import STRATEGIES, StrategyName, select_strategy


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        (ProcrastinatorType.PERFECTIONIST, StrategyName.DISTRIBUTED),
        (ProcrastinatorType.OVERWHELMED, StrategyName.DISTRIBUTED),
        (ProcrastinatorType.AVOIDANT, StrategyName.DISTRIBUTED),
        (ProcrastinatorType.LACK_OF_MOTIVATION, StrategyName.INTENSIVE),
        (ProcrastinatorType.DISTRACTION, StrategyName.INTENSIVE),
        (ProcrastinatorType.DEADLINE_DRIVEN, StrategyName.DEADLINE_PROXIMATE),
    ],
)
def test_procrastinator_type_selects_strategy(kind: ProcrastinatorType, expected: StrategyName) -> None:
    assert select_strategy(Profile(is_procrastinator=True, procrastinator_type=kind)).name is expected


def test_type_is_ignored_when_not_a_procrastinator() -> None:
    profile = Profile(is_procrastinator=False, procrastinator_type=ProcrastinatorType.DEADLINE_DRIVEN)

    assert select_strategy(profile).name is StrategyName.BALANCED
    assert select_strategy(Profile(is_procrastinator=True)).name is StrategyName.BALANCED


def test_day_orders() -> None:
    assert STRATEGIES[StrategyName.BALANCED].day_order(1, 4) == [1, 2, 3, 4]
    assert STRATEGIES[StrategyName.DEADLINE_PROXIMATE].day_order(1, 4) == [4, 3, 2, 1]


def test_per_day_caps() -> None:
    caps = {name: strategy.max_chunks_per_day for name, strategy in STRATEGIES.items()}

    assert caps[StrategyName.BALANCED](4, 3) == 2
    assert caps[StrategyName.BALANCED](1, 10) == 1
    assert caps[StrategyName.DISTRIBUTED](10, 4) == 3
    assert caps[StrategyName.INTENSIVE](10, 4) == 5
    assert caps[StrategyName.INTENSIVE](1, 1) == 2
    assert caps[StrategyName.DEADLINE_PROXIMATE](10, 7) == 2
    assert caps[StrategyName.DEADLINE_PROXIMATE](12, 2) == 12
