from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from cartcalc.core.catalog import Line, sum_count
from cartcalc.core.order import EvaluationContext, Order, RuleOutcome, RuleStage
from cartcalc.errors import ConfigurationError


class Activity(ABC):
    """
    A storewide promotion restricted to a list of SKUs.

    Subclasses only decide how the eligible lines turn into a bonus;
    selection and accumulation into the order are shared.
    """

    def __init__(self, code: str, threshold: int, skus: list[str]):
        if threshold <= 0:
            raise ConfigurationError("must be a positive unit count", field=f"{code}.threshold")
        if not skus:
            raise ConfigurationError("at least one SKU is required", field=f"{code}.skus")
        self.code = code
        self.threshold = threshold
        self.skus = tuple(skus)

    @property
    def stage(self) -> RuleStage:
        return RuleStage.ITEMS

    def select_eligible(self, order: Order) -> list[Line]:
        return order.items.intersect_by_names(self.skus)

    @abstractmethod
    def compute_bonus(self, order: Order) -> Decimal:
        raise NotImplementedError

    def apply_to_order(self, order: Order, context: EvaluationContext) -> RuleOutcome:
        eligible_count = sum_count(self.select_eligible(order))
        if eligible_count < self.threshold:
            return RuleOutcome.skipped(
                self.code, f"{eligible_count} eligible units, {self.threshold} required"
            )
        bonus = self.compute_bonus(order)
        if bonus <= 0:
            return RuleOutcome.skipped(self.code, "no discount for the eligible units")
        order.activity_bonus += bonus
        return RuleOutcome(code=self.code, applied=True, amount=bonus)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, threshold={self.threshold}, skus={list(self.skus)!r})"
