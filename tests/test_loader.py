from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

import pytest

from cartcalc.bonus import Bonus, MaxUses, OptionalLimit, SkuSet, Window
from cartcalc.core.shipping import ShippingMethod
from cartcalc.errors import ConfigurationError, UnsupportedLimitError
from cartcalc.loaders import load_checkout, parse_checkout
from cartcalc.promotions import FixedPrice, FullMinusOne

CHECKOUT = {
    "catalog": [
        {"sku": "A", "price": "10.50", "weight": 300, "market_price": "12.00"},
        {"sku": "B", "price": "4", "attributes": [{"id": 1, "name": "fresh"}]},
    ],
    "cart": [
        {"sku": "A", "quantity": 2},
        {"sku": "B", "quantity": 3},
        {"sku": "A", "quantity": 1},
    ],
    "user": {"name": "alice", "bonus_use_history": [{"bonus_code": "vip", "used_at": "2026-01-02"}]},
    "activities": [
        {"type": "full_minus_one", "code": "b3g1", "threshold": 3, "skus": ["A"]},
        {"type": "fixed_price", "code": "2-for-7", "threshold": 2, "price": "7", "skus": ["B"]},
    ],
    "bonuses": [
        {
            "code": "vip",
            "product_set": {"type": "sku", "skus": ["A"]},
            "condition": {"type": "amount", "threshold": "20"},
            "form": {"type": "percent", "rate": "0.1"},
            "time": {"start": "2026-01-01", "end": "2026-02-01"},
            "max_uses": 3,
            "optional": True,
        }
    ],
    "coupons": [{"code": "c1", "amount": "2.50"}],
    "shipping": {"method": "expedited", "address": {"city": {"id": 7, "code": "SH", "name": "Shanghai"}}},
    "opted_in": ["vip"],
}


def test_parse_checkout_builds_request() -> None:
    request = parse_checkout(CHECKOUT)

    assert request.order.user.name == "alice"
    assert request.order.user.uses_of("vip") == 1
    assert [(item.name, quantity) for item, quantity in request.order.items.lines()] == [("A", 3), ("B", 3)]
    assert request.order.items.total_weight() == 900
    assert isinstance(request.rules[0], FullMinusOne)
    assert isinstance(request.rules[1], FixedPrice)

    bonus = request.rules[2]
    assert isinstance(bonus, Bonus)
    assert bonus.apply_object.config.product_set == SkuSet(frozenset({"A"}))
    assert isinstance(bonus.time, Window)
    assert bonus.use_time == MaxUses(3)
    assert bonus.optional is OptionalLimit.OPTIONAL

    assert request.coupons[0].amount == Decimal("2.50")
    assert request.shipping_method is ShippingMethod.EXPEDITED
    assert request.address.city.region_name == "Shanghai"
    assert request.opted_in == frozenset({"vip"})


def test_load_checkout_reads_json_file(tmp_path: Path) -> None:
    path = tmp_path / "checkout.json"
    path.write_text(
        '{"catalog": [{"sku": "A", "price": 0.1}], "cart": [{"sku": "A", "quantity": 3}]}',
        encoding="utf-8",
    )

    request = load_checkout(path)

    assert request.order.items.total_amount() == Decimal("0.3")


def test_load_checkout_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_checkout(path)


@pytest.mark.parametrize(
    "bonus",
    [
        {"code": "x", "product_set": {"type": "attribute", "attributes": [{"id": 1, "name": "fresh"}]},
         "form": {"type": "percent", "rate": "0.1"}},
        {"code": "x", "condition": {"type": "amount_and_count", "amount": "10", "count": 2},
         "form": {"type": "percent", "rate": "0.1"}},
        {"code": "x", "target": "product_and_shipping_fee", "form": {"type": "percent", "rate": "0.1"}},
        {"code": "x", "target": "shipping_fee", "form": {"type": "fixed_price", "price": "1"}},
    ],
)
def test_unsupported_limits_fail_at_load(bonus: dict) -> None:
    with pytest.raises(UnsupportedLimitError):
        parse_checkout({"bonuses": [bonus]})


@pytest.mark.parametrize(
    ("payload", "field"),
    [
        ({"cart": [{"sku": "missing"}]}, "cart[0]"),
        ({"catalog": [{"sku": "A", "price": "oops"}]}, "catalog[0]"),
        ({"catalog": [{"sku": "A", "price": "1"}, {"sku": "A", "price": "2"}]}, "catalog[1]"),
        ({"bonuses": [{"code": "x", "form": {"type": "percent", "rate": "1.5"}}]}, "percent_form.rate"),
        ({"shipping": {"method": "drone"}}, "shipping.method"),
        ({"catalog": "A"}, "catalog"),
        ({"catalog": [1]}, "catalog[0]"),
        ({"cart": ["A"]}, "cart[0]"),
        ({"coupons": [5]}, "coupons[0]"),
        ({"shipping": "x"}, "shipping"),
        ({"user": {"bonus_use_history": [{"bonus_code": "x", "used_at": 5}]}}, "user.bonus_use_history[0].used_at"),
        (
            {"catalog": [{"sku": "A", "price": "1"}], "cart": [{"sku": "A", "quantity": Decimal("2.5")}]},
            "cart[0].quantity",
        ),
    ],
)
def test_malformed_documents_raise_configuration_error(payload: dict, field: str) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        parse_checkout(payload)
    assert excinfo.value.field == field


def test_checkout_document_round_trips_through_json(tmp_path: Path) -> None:
    path = tmp_path / "checkout.json"
    path.write_text(json.dumps(CHECKOUT), encoding="utf-8")

    assert load_checkout(path).order.items.total_amount() == Decimal("43.50")


def test_fractional_quantity_in_file_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "checkout.json"
    path.write_text(
        '{"catalog": [{"sku": "A", "price": "1"}], "cart": [{"sku": "A", "quantity": 2.5}]}',
        encoding="utf-8",
    )

    with pytest.raises(ConfigurationError, match="whole number"):
        load_checkout(path)


def test_whole_decimal_quantity_is_accepted(tmp_path: Path) -> None:
    path = tmp_path / "checkout.json"
    path.write_text(
        '{"catalog": [{"sku": "A", "price": "1"}], "cart": [{"sku": "A", "quantity": 2.0}]}',
        encoding="utf-8",
    )

    assert load_checkout(path).order.items.total_count() == 2
