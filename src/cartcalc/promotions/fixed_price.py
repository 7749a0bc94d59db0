from __future__ import annotations

from decimal import Decimal

from cartcalc.core.allocation import bundle_bonus
from cartcalc.core.catalog import sum_count, to_decimal
from cartcalc.core.order import Order
from cartcalc.errors import ConfigurationError

from .base import Activity


class FixedPrice(Activity):
    """N of the listed SKUs for a fixed bundle price."""

    def __init__(self, code: str, threshold: int, price: Decimal | str, skus: list[str]):
        super().__init__(code, threshold, skus)
        self.price = to_decimal(price, "price")
        if self.price < 0:
            raise ConfigurationError("must not be negative", field=f"{code}.price")

    def compute_bonus(self, order: Order) -> Decimal:
        eligible = self.select_eligible(order)
        times = sum_count(eligible) // self.threshold
        return bundle_bonus(eligible, self.threshold, self.price, times)

    def __repr__(self) -> str:
        return (
            f"FixedPrice(code={self.code!r}, threshold={self.threshold}, "
            f"price={self.price}, skus={list(self.skus)!r})"
        )
