from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from cartcalc.core.catalog import to_decimal

if TYPE_CHECKING:
    from cartcalc.core.order import Order


@dataclass(frozen=True, slots=True)
class ProductCoupon:
    """Flat discount on the products of an order."""

    code: str
    amount: Decimal

    def __post_init__(self) -> None:
        amount = to_decimal(self.amount, "amount")
        if amount < 0:
            raise ValueError(f"coupon {self.code} amount must not be negative")
        object.__setattr__(self, "amount", amount)

    def apply_to_order(self, order: Order) -> Decimal:
        order.coupon_bonus += self.amount
        return self.amount
