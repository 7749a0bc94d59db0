from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from cartcalc.core.catalog import BoughtSet
from cartcalc.core.coupon import ProductCoupon
from cartcalc.core.user import User
from cartcalc.errors import StageOrderError

from .rules import EvaluationContext, OrderRule, RuleOutcome, RuleStage

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class Order:
    """
    Accumulates the monetary breakdown of one checkout.

    Stages run in a fixed order: ``process_items`` -> ``process_activity`` ->
    ``process_shipping_fee`` -> ``process_coupon`` -> ``process_summary``.
    Activity, shipping and coupon stages run at most once; a repeated call is
    logged and ignored so accumulators are never counted twice.
    """

    def __init__(self, items: BoughtSet | None = None, user: User | None = None):
        self.user = user if user is not None else User(name="anonymous")
        self.items = items if items is not None else BoughtSet()

        self.coupon_bonus = ZERO
        self.activity_bonus = ZERO
        self.shipping_fee = ZERO
        self.items_amount = ZERO
        self._total_amount = ZERO

        self.status_items = False
        self.status_coupon = False
        self.status_activity = False
        self.status_shipping = False
        self.status_total = False

    @property
    def total_amount(self) -> Decimal:
        return self._total_amount

    def process_items(self) -> Decimal:
        self.items_amount = self.items.total_amount()
        self.status_items = True
        return self.items_amount

    def apply_rules(self, rules: Iterable[OrderRule], context: EvaluationContext) -> list[RuleOutcome]:
        outcomes = []
        for rule in rules:
            outcome = rule.apply_to_order(self, context)
            if outcome.applied:
                logger.debug(
                    "Rule %s applied: %s",
                    outcome.code,
                    outcome.amount,
                    extra={"rule_code": outcome.code, "amount": outcome.amount},
                )
            else:
                logger.info(
                    "Rule %s skipped: %s",
                    outcome.code,
                    outcome.reason,
                    extra={"rule_code": outcome.code, "skip_reason": outcome.reason},
                )
            outcomes.append(outcome)
        return outcomes

    def process_activity(
        self,
        rules: Iterable[OrderRule],
        context: EvaluationContext | None = None,
    ) -> list[RuleOutcome]:
        if not self.status_items:
            raise StageOrderError("activity", requires="items")
        if self.status_activity:
            logger.warning("Activity stage already processed, ignoring repeated call")
            return []
        context = context or EvaluationContext()
        outcomes = self.apply_rules((rule for rule in rules if rule.stage is RuleStage.ITEMS), context)
        self.status_activity = True
        return outcomes

    def process_shipping_fee(
        self,
        fee: Decimal,
        rules: Iterable[OrderRule] = (),
        context: EvaluationContext | None = None,
    ) -> list[RuleOutcome]:
        """Store the collaborator's fee verbatim, then run rules discounting it."""
        if self.status_shipping:
            logger.warning("Shipping stage already processed, ignoring repeated call")
            return []
        if fee < 0:
            raise ValueError("shipping fee must not be negative")
        self.shipping_fee = fee
        self.status_shipping = True
        context = context or EvaluationContext()
        return self.apply_rules((rule for rule in rules if rule.stage is RuleStage.SHIPPING_FEE), context)

    def process_coupon(self, coupons: Iterable[ProductCoupon]) -> Decimal:
        if self.status_coupon:
            logger.warning("Coupon stage already processed, ignoring repeated call")
            return ZERO
        applied = ZERO
        for coupon in coupons:
            applied += coupon.apply_to_order(self)
        self.status_coupon = True
        return applied

    def process_summary(self) -> Decimal:
        if not self.status_items:
            raise StageOrderError("summary", requires="items")
        self._total_amount = self.items_amount + self.shipping_fee - self.coupon_bonus - self.activity_bonus
        self.status_total = True
        return self._total_amount

    def summary(self) -> dict[str, Any]:
        return {
            "user": self.user.name,
            "items_count": self.items.total_count(),
            "items_amount": self.items_amount,
            "activity_bonus": self.activity_bonus,
            "shipping_fee": self.shipping_fee,
            "coupon_bonus": self.coupon_bonus,
            "total_amount": self.total_amount,
            "status": {
                "items": self.status_items,
                "activity": self.status_activity,
                "shipping": self.status_shipping,
                "coupon": self.status_coupon,
                "total": self.status_total,
            },
        }

    def __repr__(self) -> str:
        return (
            f"Order(items={self.items!r}, items_amount={self.items_amount}, "
            f"activity_bonus={self.activity_bonus}, shipping_fee={self.shipping_fee}, "
            f"coupon_bonus={self.coupon_bonus}, total_amount={self.total_amount})"
        )
