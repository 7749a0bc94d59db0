from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import assert_never

from cartcalc.core.order import EvaluationContext, Order, RuleOutcome, RuleStage

from .gates import (
    AnyUser,
    BonusOrigin,
    NoTimeLimit,
    OptionalLimit,
    TimeLimit,
    Unlimited,
    UserRelatedLimit,
    UseTimeLimit,
    VisibilityLimit,
    is_exceed_max,
    time_includes,
    user_allowed,
)
from .limits import (
    ApplyObjectLimit,
    ProductAndShippingFeeTarget,
    ProductTarget,
    ShippingFeeTarget,
    charge,
    is_meet_condition,
)


@dataclass(frozen=True, slots=True)
class Bonus:
    """
    A configurable discount rule. Holds no per-order state, so one instance
    can be evaluated against any number of orders.
    """

    code: str
    apply_object: ApplyObjectLimit
    time: TimeLimit = field(default_factory=NoTimeLimit)
    use_time: UseTimeLimit = field(default_factory=Unlimited)
    user_related: UserRelatedLimit = field(default_factory=AnyUser)
    optional: OptionalLimit = OptionalLimit.MANDATORY
    visibility: VisibilityLimit = VisibilityLimit.VISIBLE
    origin: BonusOrigin = BonusOrigin.MARKETING_OPERATION_STAFF

    @property
    def stage(self) -> RuleStage:
        match self.apply_object:
            case ProductTarget():
                return RuleStage.ITEMS
            case ShippingFeeTarget() | ProductAndShippingFeeTarget():
                return RuleStage.SHIPPING_FEE
            case _:
                assert_never(self.apply_object)

    def blocked_reason(self, order: Order, context: EvaluationContext) -> str | None:
        if not time_includes(self.time, context.now):
            return "outside time window"
        if is_exceed_max(self.use_time, order.user):
            return "exceed max use time"
        if not user_allowed(self.user_related, order.user):
            return f"not available to user {order.user.name}"
        if self.optional is OptionalLimit.OPTIONAL and self.code not in context.opted_in:
            return "optional bonus not selected"
        if not is_meet_condition(self.apply_object, order.items):
            return "not meet apply condition"
        return None

    def charge(self, order: Order) -> Decimal:
        return charge(self.apply_object, order)

    def apply_to_order(self, order: Order, context: EvaluationContext) -> RuleOutcome:
        reason = self.blocked_reason(order, context)
        if reason is not None:
            return RuleOutcome.skipped(self.code, reason)

        bonus = self.charge(order)
        if bonus <= 0:
            return RuleOutcome.skipped(self.code, "bonus is zero")
        order.activity_bonus += bonus
        return RuleOutcome(code=self.code, applied=True, amount=bonus)
