from __future__ import annotations

from decimal import Decimal

from cartcalc.core.allocation import consume_cheapest, usable_count
from cartcalc.core.catalog import sum_count
from cartcalc.core.order import Order

from .base import Activity


class FullMinusOne(Activity):
    """
    Buy N of the listed SKUs, get one free.

    Only whole groups of N take part: the cheapest ``floor(count / N) * N``
    units form the groups and the cheapest unit of each group is freed.
    Leftover units keep their price.
    """

    def compute_bonus(self, order: Order) -> Decimal:
        eligible = self.select_eligible(order)
        participating = usable_count(sum_count(eligible), self.threshold)
        groups = participating // self.threshold
        # one free unit per group, taken from the cheapest end
        return consume_cheapest(eligible, groups)
