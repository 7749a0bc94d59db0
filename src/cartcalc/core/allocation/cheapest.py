from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from cartcalc.core.catalog import Line


def sort_by_price(lines: Iterable[Line]) -> list[Line]:
    # sorted() is stable, equal prices keep their bought-set order
    return sorted(lines, key=lambda line: line[0].price)


def usable_count(eligible_count: int, group_size: int) -> int:
    """Largest multiple of ``group_size`` that fits in ``eligible_count``."""
    if group_size <= 0:
        raise ValueError("group_size must be positive")
    return (eligible_count // group_size) * group_size


def consume_cheapest(lines: Iterable[Line], budget: int) -> Decimal:
    """
    Value of the ``budget`` cheapest units among ``lines``.

    Lines are walked in ascending price order; a line that fits the remaining
    budget contributes price x quantity, the first line that does not fit
    contributes price x remaining budget and ends the walk.
    """
    total = Decimal("0")
    remaining = max(budget, 0)
    for item, quantity in sort_by_price(lines):
        if remaining <= 0:
            break
        if quantity <= remaining:
            total += item.price * quantity
            remaining -= quantity
        else:
            total += item.price * remaining
            break
    return total


def bundle_bonus(lines: Iterable[Line], bundle_size: int, bundle_price: Decimal, times: int) -> Decimal:
    """
    Bonus of selling ``times`` bundles of ``bundle_size`` units at
    ``bundle_price`` each, measured against the cheapest units that fill them.

    Non-positive results are dropped and the bonus never exceeds the natural
    price of the units it covers.
    """
    if times <= 0:
        return Decimal("0")
    origin_price = consume_cheapest(lines, bundle_size * times)
    bonus = bundle_price * times - origin_price
    if bonus <= 0:
        return Decimal("0")
    return min(bonus, origin_price)
