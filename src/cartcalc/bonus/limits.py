"""
Limits describing what a bonus applies to and how much it is worth.

Every limit is a closed union of frozen dataclasses; consumers dispatch with
``match`` and end with ``assert_never`` so a new variant fails type checking
at every site that does not handle it. Variants that are not supported yet
raise ``UnsupportedLimitError`` when constructed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TypeAlias, assert_never

from cartcalc.core.allocation import bundle_bonus, consume_cheapest
from cartcalc.core.catalog import Attribute, BoughtSet, Line, sum_amount, sum_count, to_decimal
from cartcalc.core.order import Order
from cartcalc.errors import ConfigurationError, UnsupportedLimitError

ZERO = Decimal("0")


# Apply condition


@dataclass(frozen=True, slots=True)
class NoCondition:
    pass


@dataclass(frozen=True, slots=True)
class AmountCondition:
    """Eligible subset must be worth strictly more than ``threshold``."""

    threshold: Decimal

    def __post_init__(self) -> None:
        threshold = to_decimal(self.threshold, "threshold")
        if threshold < 0:
            raise ConfigurationError("must not be negative", field="amount_condition.threshold")
        object.__setattr__(self, "threshold", threshold)


@dataclass(frozen=True, slots=True)
class CountCondition:
    """Eligible subset must hold strictly more than ``threshold`` units."""

    threshold: int

    def __post_init__(self) -> None:
        if self.threshold < 0:
            raise ConfigurationError("must not be negative", field="count_condition.threshold")


@dataclass(frozen=True, slots=True)
class AmountAndCountCondition:
    amount: Decimal
    count: int

    def __post_init__(self) -> None:
        raise UnsupportedLimitError("Combined amount-and-count condition")


ApplyConditionLimit: TypeAlias = NoCondition | AmountCondition | CountCondition | AmountAndCountCondition


# Product set


@dataclass(frozen=True, slots=True)
class AnyProduct:
    pass


@dataclass(frozen=True, slots=True)
class SkuSet:
    names: frozenset[str]

    def __post_init__(self) -> None:
        names = frozenset(self.names)
        if not names:
            raise ConfigurationError("must list at least one SKU", field="sku_set")
        object.__setattr__(self, "names", names)


@dataclass(frozen=True, slots=True)
class AttributeSet:
    attributes: frozenset[Attribute]

    def __post_init__(self) -> None:
        raise UnsupportedLimitError("Attribute-based product set")


@dataclass(frozen=True, slots=True)
class SkuAndAttributeSet:
    names: frozenset[str]
    attributes: frozenset[Attribute]

    def __post_init__(self) -> None:
        raise UnsupportedLimitError("Combined SKU-and-attribute product set")


ProductSetLimit: TypeAlias = AnyProduct | SkuSet | AttributeSet | SkuAndAttributeSet


# Bonus form


@dataclass(frozen=True, slots=True)
class PercentForm:
    """``rate`` is a fraction: Decimal("0.2") takes 20% off."""

    rate: Decimal

    def __post_init__(self) -> None:
        rate = to_decimal(self.rate, "rate")
        if not 0 <= rate <= 1:
            raise ConfigurationError("must be between 0 and 1", field="percent_form.rate")
        object.__setattr__(self, "rate", rate)


@dataclass(frozen=True, slots=True)
class AmountForm:
    value: Decimal

    def __post_init__(self) -> None:
        value = to_decimal(self.value, "value")
        if value < 0:
            raise ConfigurationError("must not be negative", field="amount_form.value")
        object.__setattr__(self, "value", value)


@dataclass(frozen=True, slots=True)
class FixedPriceForm:
    """Bundle of ``RangeCap.count`` units sold for ``price``."""

    price: Decimal

    def __post_init__(self) -> None:
        price = to_decimal(self.price, "price")
        if price < 0:
            raise ConfigurationError("must not be negative", field="fixed_price_form.price")
        object.__setattr__(self, "price", price)


BonusFormLimit: TypeAlias = PercentForm | AmountForm | FixedPriceForm


# Apply range


@dataclass(frozen=True, slots=True)
class NoRange:
    pass


@dataclass(frozen=True, slots=True)
class RangeCap:
    """At most ``count`` units per application are discounted."""

    count: int

    def __post_init__(self) -> None:
        if self.count <= 0:
            raise ConfigurationError("must be positive", field="range_cap.count")


ApplyRangeLimit: TypeAlias = NoRange | RangeCap


# Superposition


@dataclass(frozen=True, slots=True)
class FixedTimes:
    times: int

    def __post_init__(self) -> None:
        if self.times < 0:
            raise ConfigurationError("must not be negative", field="fixed_times.times")


@dataclass(frozen=True, slots=True)
class AutoTimes:
    """Repeat once per whole multiple of the condition threshold."""


SuperpositionLimit: TypeAlias = FixedTimes | AutoTimes


def _check_auto_threshold(condition: ApplyConditionLimit, superposition: SuperpositionLimit) -> None:
    if not isinstance(superposition, AutoTimes):
        return
    if isinstance(condition, (AmountCondition, CountCondition)) and condition.threshold == 0:
        raise ConfigurationError("automatic superposition needs a positive condition threshold")


@dataclass(frozen=True, slots=True)
class ProductApplyObjectConfig:
    product_set: ProductSetLimit = field(default_factory=AnyProduct)
    condition: ApplyConditionLimit = field(default_factory=NoCondition)
    bonus_form: BonusFormLimit = field(default_factory=lambda: PercentForm(ZERO))
    apply_range: ApplyRangeLimit = field(default_factory=NoRange)
    superposition: SuperpositionLimit = field(default_factory=AutoTimes)

    def __post_init__(self) -> None:
        _check_auto_threshold(self.condition, self.superposition)
        if isinstance(self.bonus_form, FixedPriceForm) and not isinstance(self.apply_range, RangeCap):
            raise ConfigurationError("fixed price form needs a range cap as bundle size")


@dataclass(frozen=True, slots=True)
class ShippingFeeApplyObjectConfig:
    product_set: ProductSetLimit = field(default_factory=AnyProduct)
    condition: ApplyConditionLimit = field(default_factory=NoCondition)
    bonus_form: BonusFormLimit = field(default_factory=lambda: PercentForm(ZERO))
    superposition: SuperpositionLimit = field(default_factory=AutoTimes)

    def __post_init__(self) -> None:
        _check_auto_threshold(self.condition, self.superposition)
        if isinstance(self.bonus_form, FixedPriceForm):
            raise UnsupportedLimitError("Fixed price form on shipping fee")


# Apply object


@dataclass(frozen=True, slots=True)
class ProductTarget:
    config: ProductApplyObjectConfig


@dataclass(frozen=True, slots=True)
class ShippingFeeTarget:
    config: ShippingFeeApplyObjectConfig


@dataclass(frozen=True, slots=True)
class ProductAndShippingFeeTarget:
    product: ProductApplyObjectConfig
    shipping_fee: ShippingFeeApplyObjectConfig

    def __post_init__(self) -> None:
        raise UnsupportedLimitError("Combined product-and-shipping-fee target")


ApplyObjectLimit: TypeAlias = ProductTarget | ShippingFeeTarget | ProductAndShippingFeeTarget


def filter_products(product_set: ProductSetLimit, items: BoughtSet) -> list[Line]:
    match product_set:
        case AnyProduct():
            return items.lines()
        case SkuSet(names=names):
            return items.intersect_by_names(names)
        case AttributeSet() | SkuAndAttributeSet():
            raise UnsupportedLimitError("Attribute-based product set")
        case _:
            assert_never(product_set)


def condition_met(condition: ApplyConditionLimit, lines: list[Line]) -> bool:
    match condition:
        case NoCondition():
            return True
        case AmountCondition(threshold=threshold):
            return sum_amount(lines) > threshold
        case CountCondition(threshold=threshold):
            return sum_count(lines) > threshold
        case AmountAndCountCondition():
            raise UnsupportedLimitError("Combined amount-and-count condition")
        case _:
            assert_never(condition)


def _config_of(apply_object: ApplyObjectLimit) -> ProductApplyObjectConfig | ShippingFeeApplyObjectConfig:
    match apply_object:
        case ProductTarget(config=config) | ShippingFeeTarget(config=config):
            return config
        case ProductAndShippingFeeTarget():
            raise UnsupportedLimitError("Combined product-and-shipping-fee target")
        case _:
            assert_never(apply_object)


def is_meet_condition(apply_object: ApplyObjectLimit, items: BoughtSet) -> bool:
    config = _config_of(apply_object)
    filtered = filter_products(config.product_set, items)
    if not filtered:
        return False
    return condition_met(config.condition, filtered)


def apply_times(apply_object: ApplyObjectLimit, items: BoughtSet) -> int:
    config = _config_of(apply_object)
    match config.superposition:
        case FixedTimes(times=times):
            return times
        case AutoTimes():
            pass
        case _:
            assert_never(config.superposition)

    filtered = filter_products(config.product_set, items)
    condition = config.condition
    match condition:
        case NoCondition():
            return 1
        case AmountCondition(threshold=threshold):
            return int(sum_amount(filtered) // threshold)
        case CountCondition(threshold=threshold):
            return sum_count(filtered) // threshold
        case AmountAndCountCondition():
            raise UnsupportedLimitError("Combined amount-and-count condition")
        case _:
            assert_never(condition)


def _charge_product(config: ProductApplyObjectConfig, order: Order, times: int) -> Decimal:
    items_amount = order.items_amount
    form = config.bonus_form
    match form:
        case PercentForm(rate=rate):
            match config.apply_range:
                case NoRange():
                    return min(items_amount * rate * times, items_amount)
                case RangeCap(count=count):
                    filtered = filter_products(config.product_set, order.items)
                    return consume_cheapest(filtered, count * times) * rate
                case _:
                    assert_never(config.apply_range)
        case AmountForm(value=value):
            return min(value * times, items_amount)
        case FixedPriceForm(price=price):
            match config.apply_range:
                case RangeCap(count=bundle_size):
                    filtered = filter_products(config.product_set, order.items)
                    bundles = min(times, sum_count(filtered) // bundle_size)
                    return bundle_bonus(filtered, bundle_size, price, bundles)
                case NoRange():
                    raise ConfigurationError("fixed price form needs a range cap as bundle size", field="apply_range")
                case _:
                    assert_never(config.apply_range)
        case _:
            assert_never(form)


def _charge_shipping_fee(config: ShippingFeeApplyObjectConfig, order: Order, times: int) -> Decimal:
    shipping_fee = order.shipping_fee
    form = config.bonus_form
    match form:
        case PercentForm(rate=rate):
            return min(shipping_fee * rate * times, shipping_fee)
        case AmountForm(value=value):
            return min(value * times, shipping_fee)
        case FixedPriceForm():
            raise UnsupportedLimitError("Fixed price form on shipping fee")
        case _:
            assert_never(form)


def charge(apply_object: ApplyObjectLimit, order: Order) -> Decimal:
    """Bonus the apply object is worth on ``order``. Does not mutate the order."""
    times = apply_times(apply_object, order.items)
    if times <= 0:
        return ZERO
    match apply_object:
        case ProductTarget(config=config):
            return _charge_product(config, order, times)
        case ShippingFeeTarget(config=config):
            return _charge_shipping_fee(config, order, times)
        case ProductAndShippingFeeTarget():
            raise UnsupportedLimitError("Combined product-and-shipping-fee target")
        case _:
            assert_never(apply_object)
