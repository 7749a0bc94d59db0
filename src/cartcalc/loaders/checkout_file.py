from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from dateutil import parser as dt_parser

from cartcalc.bonus import (
    AmountAndCountCondition,
    AmountCondition,
    AmountForm,
    ApplyConditionLimit,
    ApplyRangeLimit,
    AnyProduct,
    AnyUser,
    AttributeSet,
    AutoTimes,
    Bonus,
    BonusFormLimit,
    BonusOrigin,
    CountCondition,
    FixedPriceForm,
    FixedTimes,
    MaxUses,
    NoCondition,
    NoRange,
    NoTimeLimit,
    OnlyUser,
    OptionalLimit,
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
    StartsAt,
    SuperpositionLimit,
    TimeLimit,
    Unlimited,
    VisibilityLimit,
    Window,
)
from cartcalc.bonus.gates import as_utc
from cartcalc.core.catalog import Attribute, BoughtSet, CatalogItem, to_decimal
from cartcalc.core.coupon import ProductCoupon
from cartcalc.core.order import Order, OrderRule
from cartcalc.core.shipping import Address, Region, ShippingMethod
from cartcalc.core.user import BonusUseRecord, User
from cartcalc.errors import ConfigurationError
from cartcalc.promotions import FixedPrice, FullMinusOne


@dataclass(slots=True)
class CheckoutRequest:
    order: Order
    rules: list[OrderRule] = field(default_factory=list)
    coupons: list[ProductCoupon] = field(default_factory=list)
    shipping_method: ShippingMethod = ShippingMethod.STANDARD
    address: Address = field(default_factory=Address)
    opted_in: frozenset[str] = frozenset()


def _parse_datetime(value: str, path: str) -> datetime:
    try:
        return as_utc(dt_parser.parse(value))
    except (TypeError, ValueError, OverflowError) as exc:
        raise ConfigurationError(f"invalid timestamp {value!r}", field=path) from exc


def _object(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigurationError(f"must be a JSON object, got {type(value).__name__}", field=path)
    return value


def _array(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise ConfigurationError(f"must be a JSON array, got {type(value).__name__}", field=path)
    return value


def _integer(value: Any, path: str) -> int:
    """Whole numbers only; JSON ``2.5`` arrives as Decimal and is rejected rather than truncated."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, Decimal) and value.is_finite() and value == value.to_integral_value():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    raise ConfigurationError(f"must be a whole number, got {value!r}", field=path)


def _require(payload: Any, key: str, path: str) -> Any:
    if key not in _object(payload, path):
        raise ConfigurationError("is required", field=f"{path}.{key}")
    return payload[key]


def _decimal(value: Any, path: str) -> Decimal:
    try:
        return to_decimal(value, path)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(str(exc), field=path) from exc


def _parse_attribute(raw: dict[str, Any], path: str) -> Attribute:
    return Attribute(
        id=_integer(_require(raw, "id", path), f"{path}.id"),
        name=str(_require(raw, "name", path)),
    )


def _parse_catalog(raw_items: list[dict[str, Any]]) -> dict[str, CatalogItem]:
    catalog: dict[str, CatalogItem] = {}
    for index, raw in enumerate(_array(raw_items, "catalog")):
        path = f"catalog[{index}]"
        name = str(_require(raw, "sku", path))
        if name in catalog:
            raise ConfigurationError(f"duplicate SKU {name}", field=path)
        try:
            catalog[name] = CatalogItem(
                name=name,
                price=_require(raw, "price", path),
                weight=_integer(raw.get("weight", 0), f"{path}.weight"),
                attributes=frozenset(
                    _parse_attribute(attr, f"{path}.attributes[{attr_index}]")
                    for attr_index, attr in enumerate(_array(raw.get("attributes", []), f"{path}.attributes"))
                ),
                market_price=raw.get("market_price"),
            )
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(str(exc), field=path) from exc
    return catalog


def _parse_cart(raw_lines: list[dict[str, Any]], catalog: dict[str, CatalogItem]) -> BoughtSet:
    bought = BoughtSet()
    for index, raw in enumerate(_array(raw_lines, "cart")):
        path = f"cart[{index}]"
        name = str(_require(raw, "sku", path))
        item = catalog.get(name)
        if item is None:
            raise ConfigurationError(f"unknown SKU {name}", field=path)
        quantity = _integer(raw.get("quantity", 1), f"{path}.quantity")
        try:
            bought.add(item, quantity)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(str(exc), field=path) from exc
    return bought


def _parse_user(raw: dict[str, Any] | None) -> User:
    if not raw:
        return User(name="anonymous")
    raw = _object(raw, "user")
    history = [
        BonusUseRecord(
            bonus_code=str(_require(record, "bonus_code", f"user.bonus_use_history[{index}]")),
            used_at=_parse_datetime(record["used_at"], f"user.bonus_use_history[{index}].used_at")
            if record.get("used_at")
            else None,
        )
        for index, record in enumerate(_array(raw.get("bonus_use_history", []), "user.bonus_use_history"))
    ]
    return User(name=str(raw.get("name", "anonymous")), bonus_use_history=history)


def _parse_activity(raw: dict[str, Any], index: int) -> OrderRule:
    path = f"activities[{index}]"
    kind = _require(raw, "type", path)
    code = str(raw.get("code", f"activity-{index}"))
    threshold = _integer(_require(raw, "threshold", path), f"{path}.threshold")
    skus = [str(sku) for sku in _array(_require(raw, "skus", path), f"{path}.skus")]
    if kind == "full_minus_one":
        return FullMinusOne(code=code, threshold=threshold, skus=skus)
    if kind == "fixed_price":
        return FixedPrice(code=code, threshold=threshold, price=_require(raw, "price", path), skus=skus)
    raise ConfigurationError(f"unknown activity type {kind!r}", field=f"{path}.type")


def _parse_product_set(raw: dict[str, Any] | None, path: str) -> ProductSetLimit:
    raw = _object(raw or {"type": "any"}, path)
    kind = raw.get("type", "any")
    if kind == "any":
        return AnyProduct()
    if kind == "sku":
        return SkuSet(frozenset(str(name) for name in _require(raw, "skus", path)))
    attributes = frozenset(_parse_attribute(attr, f"{path}.attributes") for attr in raw.get("attributes", []))
    if kind == "attribute":
        return AttributeSet(attributes)
    if kind == "sku_and_attribute":
        return SkuAndAttributeSet(frozenset(raw.get("skus", [])), attributes)
    raise ConfigurationError(f"unknown product set type {kind!r}", field=f"{path}.type")


def _parse_condition(raw: dict[str, Any] | None, path: str) -> ApplyConditionLimit:
    raw = _object(raw or {"type": "none"}, path)
    kind = raw.get("type", "none")
    if kind == "none":
        return NoCondition()
    if kind == "amount":
        return AmountCondition(_decimal(_require(raw, "threshold", path), f"{path}.threshold"))
    if kind == "count":
        return CountCondition(_integer(_require(raw, "threshold", path), f"{path}.threshold"))
    if kind == "amount_and_count":
        return AmountAndCountCondition(
            _decimal(raw.get("amount", 0), f"{path}.amount"),
            _integer(raw.get("count", 0), f"{path}.count"),
        )
    raise ConfigurationError(f"unknown condition type {kind!r}", field=f"{path}.type")


def _parse_form(raw: dict[str, Any], path: str) -> BonusFormLimit:
    kind = _require(raw, "type", path)
    if kind == "percent":
        return PercentForm(_decimal(_require(raw, "rate", path), f"{path}.rate"))
    if kind == "amount":
        return AmountForm(_decimal(_require(raw, "value", path), f"{path}.value"))
    if kind == "fixed_price":
        return FixedPriceForm(_decimal(_require(raw, "price", path), f"{path}.price"))
    raise ConfigurationError(f"unknown bonus form type {kind!r}", field=f"{path}.type")


def _parse_range(raw: dict[str, Any] | None, path: str) -> ApplyRangeLimit:
    if not raw:
        return NoRange()
    raw = _object(raw, path)
    if raw.get("type", "none") == "none":
        return NoRange()
    if raw["type"] == "count":
        return RangeCap(_integer(_require(raw, "count", path), f"{path}.count"))
    raise ConfigurationError(f"unknown range type {raw['type']!r}", field=f"{path}.type")


def _parse_superposition(raw: dict[str, Any] | None, path: str) -> SuperpositionLimit:
    if not raw:
        return AutoTimes()
    raw = _object(raw, path)
    if raw.get("type", "auto") == "auto":
        return AutoTimes()
    if raw["type"] == "fixed":
        return FixedTimes(_integer(_require(raw, "times", path), f"{path}.times"))
    raise ConfigurationError(f"unknown superposition type {raw['type']!r}", field=f"{path}.type")


def _parse_time(raw: dict[str, Any] | None, path: str) -> TimeLimit:
    if not raw:
        return NoTimeLimit()
    start = _parse_datetime(_require(raw, "start", path), f"{path}.start")
    if raw.get("end"):
        return Window(start=start, duration=_parse_datetime(raw["end"], f"{path}.end") - start)
    return StartsAt(start)


def _parse_bonus(raw: dict[str, Any], index: int) -> Bonus:
    path = f"bonuses[{index}]"
    code = str(_require(raw, "code", path))
    target = raw.get("target", "product")
    product_set = _parse_product_set(raw.get("product_set"), f"{path}.product_set")
    condition = _parse_condition(raw.get("condition"), f"{path}.condition")
    form = _parse_form(_require(raw, "form", path), f"{path}.form")
    superposition = _parse_superposition(raw.get("superposition"), f"{path}.superposition")

    if target == "product":
        apply_object = ProductTarget(
            ProductApplyObjectConfig(
                product_set=product_set,
                condition=condition,
                bonus_form=form,
                apply_range=_parse_range(raw.get("range"), f"{path}.range"),
                superposition=superposition,
            )
        )
    elif target == "shipping_fee":
        apply_object = ShippingFeeTarget(
            ShippingFeeApplyObjectConfig(
                product_set=product_set,
                condition=condition,
                bonus_form=form,
                superposition=superposition,
            )
        )
    elif target == "product_and_shipping_fee":
        apply_object = ProductAndShippingFeeTarget(
            product=ProductApplyObjectConfig(product_set=product_set, condition=condition, bonus_form=form),
            shipping_fee=ShippingFeeApplyObjectConfig(product_set=product_set, condition=condition, bonus_form=form),
        )
    else:
        raise ConfigurationError(f"unknown target {target!r}", field=f"{path}.target")

    try:
        return Bonus(
            code=code,
            apply_object=apply_object,
            time=_parse_time(raw.get("time"), f"{path}.time"),
            use_time=MaxUses(_integer(raw["max_uses"], f"{path}.max_uses"))
            if raw.get("max_uses") is not None
            else Unlimited(),
            user_related=OnlyUser(str(raw["only_user"])) if raw.get("only_user") else AnyUser(),
            optional=OptionalLimit.OPTIONAL if raw.get("optional") else OptionalLimit.MANDATORY,
            visibility=VisibilityLimit(raw.get("visibility", VisibilityLimit.VISIBLE.value)),
            origin=BonusOrigin(raw.get("origin", BonusOrigin.MARKETING_OPERATION_STAFF.value)),
        )
    except ValueError as exc:
        raise ConfigurationError(str(exc), field=path) from exc


def _parse_address(raw: dict[str, Any] | None) -> Address:
    if not raw:
        return Address()
    raw = _object(raw, "shipping.address")

    def region(key: str) -> Region:
        data = _object(raw.get(key) or {}, f"shipping.address.{key}")
        return Region(
            region_id=_integer(data.get("id", 0), f"shipping.address.{key}.id"),
            region_code=str(data.get("code", "")),
            region_name=str(data.get("name", "")),
        )

    return Address(
        country=region("country"),
        province=region("province"),
        city=region("city"),
        zip_code=str(raw.get("zip_code", "")),
    )


def parse_checkout(payload: dict[str, Any]) -> CheckoutRequest:
    if not isinstance(payload, dict):
        raise ConfigurationError("checkout document must be a JSON object")

    catalog = _parse_catalog(payload.get("catalog", []))
    order = Order(items=_parse_cart(payload.get("cart", []), catalog), user=_parse_user(payload.get("user")))

    rules: list[OrderRule] = []
    try:
        activities = _array(payload.get("activities", []), "activities")
        bonuses = _array(payload.get("bonuses", []), "bonuses")
        rules.extend(_parse_activity(raw, index) for index, raw in enumerate(activities))
        rules.extend(_parse_bonus(raw, index) for index, raw in enumerate(bonuses))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"invalid rule: {exc}") from exc

    coupons = []
    for index, raw in enumerate(_array(payload.get("coupons", []), "coupons")):
        path = f"coupons[{index}]"
        raw = _object(raw, path)
        try:
            coupons.append(
                ProductCoupon(code=str(raw.get("code", f"coupon-{index}")), amount=_require(raw, "amount", path))
            )
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(str(exc), field=path) from exc

    shipping = _object(payload.get("shipping") or {}, "shipping")
    try:
        method = ShippingMethod(shipping.get("method", ShippingMethod.STANDARD.value))
    except ValueError as exc:
        raise ConfigurationError(f"unknown shipping method {shipping.get('method')!r}", field="shipping.method") from exc

    return CheckoutRequest(
        order=order,
        rules=rules,
        coupons=coupons,
        shipping_method=method,
        address=_parse_address(shipping.get("address")),
        opted_in=frozenset(str(code) for code in _array(payload.get("opted_in", []), "opted_in")),
    )


def load_checkout(path: Path) -> CheckoutRequest:
    try:
        with path.open("r", encoding="utf-8-sig") as fh:
            payload = json.load(fh, parse_float=Decimal)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"invalid JSON: {exc}", field=str(path)) from exc
    return parse_checkout(payload)
