from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from cartcalc.bonus import VisibilityLimit
from cartcalc.config import Settings
from cartcalc.core.order import EvaluationContext, RuleOutcome
from cartcalc.core.shipping import FlatRateShipping, ShippingCalculator
from cartcalc.loaders import CheckoutRequest


class CheckoutPipeline:
    """
    Prices one checkout request: items total, activities and bonuses,
    shipping fee, coupons, summary. Rule ineligibility never aborts the run.
    """

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger | logging.LoggerAdapter,
        shipping: ShippingCalculator | None = None,
    ):
        self.settings = settings
        self.logger = logger
        self.shipping = shipping or FlatRateShipping(settings.shipping_fees())

    @staticmethod
    def _outcome_row(outcome: RuleOutcome, visibility: VisibilityLimit) -> dict[str, Any]:
        return {
            "code": outcome.code,
            "visibility": visibility.value,
            "applied": outcome.applied,
            "amount": outcome.amount,
            "reason": outcome.reason,
        }

    def run(self, request: CheckoutRequest, now: datetime | None = None) -> dict[str, Any]:
        order = request.order
        if now is None:
            context = EvaluationContext(opted_in=request.opted_in)
        else:
            context = EvaluationContext(now=now, opted_in=request.opted_in)

        items_amount = order.process_items()
        self.logger.info(
            "Items processed: %s lines, %s units, amount %s",
            len(order.items),
            order.items.total_count(),
            items_amount,
        )

        outcomes = order.process_activity(request.rules, context)

        fee = self.shipping.fee(request.shipping_method, request.address, order.items.total_weight())
        outcomes.extend(order.process_shipping_fee(fee, request.rules, context))
        self.logger.info("Shipping fee %s (%s)", fee, request.shipping_method.value)

        applied_rules = [outcome for outcome in outcomes if outcome.applied]
        self.logger.info(
            "Rules evaluated: %s applied, %s skipped, activity bonus %s",
            len(applied_rules),
            len(outcomes) - len(applied_rules),
            order.activity_bonus,
        )

        coupon_bonus = order.process_coupon(request.coupons)
        self.logger.info("Coupons applied: %s, coupon bonus %s", len(request.coupons), coupon_bonus)

        total = order.process_summary()
        self.logger.info("Order total %s", total)

        stats = order.summary()
        stats["shipping_method"] = request.shipping_method.value
        visibility = {
            rule.code: getattr(rule, "visibility", VisibilityLimit.VISIBLE) for rule in request.rules
        }
        stats["rules"] = [self._outcome_row(outcome, visibility[outcome.code]) for outcome in outcomes]
        stats["rules_applied"] = len(applied_rules)
        stats["rules_skipped"] = len(outcomes) - len(applied_rules)
        return stats
