from .bonus import Bonus
from .gates import (
    AnyUser,
    BonusOrigin,
    MaxUses,
    NoTimeLimit,
    OnlyUser,
    OptionalLimit,
    StartsAt,
    TimeLimit,
    Unlimited,
    UserRelatedLimit,
    UseTimeLimit,
    VisibilityLimit,
    Window,
    is_exceed_max,
    time_includes,
    user_allowed,
)
from .limits import (
    AmountAndCountCondition,
    AmountCondition,
    AmountForm,
    AnyProduct,
    ApplyConditionLimit,
    ApplyObjectLimit,
    ApplyRangeLimit,
    AttributeSet,
    AutoTimes,
    BonusFormLimit,
    CountCondition,
    FixedPriceForm,
    FixedTimes,
    NoCondition,
    NoRange,
    PercentForm,
    ProductAndShippingFeeTarget,
    ProductApplyObjectConfig,
    ProductSetLimit,
    ProductTarget,
    RangeCap,
    ShippingFeeApplyObjectConfig,
    ShippingFeeTarget,
    SkuAndAttributeSet,
    SkuSet,
    SuperpositionLimit,
    apply_times,
    charge,
    filter_products,
    is_meet_condition,
)

__all__ = [
    "Bonus",
    "BonusOrigin",
    "OptionalLimit",
    "VisibilityLimit",
    "TimeLimit",
    "NoTimeLimit",
    "StartsAt",
    "Window",
    "UseTimeLimit",
    "Unlimited",
    "MaxUses",
    "UserRelatedLimit",
    "AnyUser",
    "OnlyUser",
    "time_includes",
    "is_exceed_max",
    "user_allowed",
    "ApplyConditionLimit",
    "NoCondition",
    "AmountCondition",
    "CountCondition",
    "AmountAndCountCondition",
    "ProductSetLimit",
    "AnyProduct",
    "SkuSet",
    "AttributeSet",
    "SkuAndAttributeSet",
    "BonusFormLimit",
    "PercentForm",
    "AmountForm",
    "FixedPriceForm",
    "ApplyRangeLimit",
    "NoRange",
    "RangeCap",
    "SuperpositionLimit",
    "FixedTimes",
    "AutoTimes",
    "ProductApplyObjectConfig",
    "ShippingFeeApplyObjectConfig",
    "ApplyObjectLimit",
    "ProductTarget",
    "ShippingFeeTarget",
    "ProductAndShippingFeeTarget",
    "filter_products",
    "is_meet_condition",
    "apply_times",
    "charge",
]
