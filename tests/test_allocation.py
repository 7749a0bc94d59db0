from __future__ import annotations

from decimal import Decimal

import pytest

from cartcalc.core.allocation import bundle_bonus, consume_cheapest, usable_count
from cartcalc.core.catalog import CatalogItem

CHEAP = CatalogItem(name="cheap", price=Decimal("1.50"))
MID = CatalogItem(name="mid", price=Decimal("4"))
DEAR = CatalogItem(name="dear", price=Decimal("9.99"))


def test_consume_cheapest_takes_whole_lines_then_partial() -> None:
    lines = [(DEAR, 2), (CHEAP, 2), (MID, 3)]

    # 2 x 1.50 + 3 x 4 + 1 x 9.99
    assert consume_cheapest(lines, 6) == Decimal("24.99")


def test_consume_cheapest_with_budget_larger_than_lines() -> None:
    assert consume_cheapest([(MID, 2)], 10) == Decimal("8")


@pytest.mark.parametrize("budget", [0, -3])
def test_consume_cheapest_with_empty_budget(budget: int) -> None:
    assert consume_cheapest([(MID, 2)], budget) == Decimal("0")


def test_usable_count_rounds_down_to_group_multiple() -> None:
    assert usable_count(9, 4) == 8
    assert usable_count(3, 4) == 0
    with pytest.raises(ValueError):
        usable_count(3, 0)


def test_bundle_bonus_drops_non_positive_result() -> None:
    # bundle price below natural price never produces a negative bonus
    assert bundle_bonus([(DEAR, 3)], 3, Decimal("1"), 1) == Decimal("0")
    assert bundle_bonus([(CHEAP, 3)], 3, Decimal("6"), 0) == Decimal("0")
