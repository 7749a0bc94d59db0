from __future__ import annotations

from decimal import Decimal

import pytest

from cartcalc.bonus import Bonus, PercentForm, ShippingFeeApplyObjectConfig, ShippingFeeTarget
from cartcalc.core.coupon import ProductCoupon
from cartcalc.core.order import EvaluationContext
from cartcalc.errors import StageOrderError
from cartcalc.promotions import FullMinusOne


def test_stages_compose_total(make_order) -> None:  # noqa: ANN001
    order = make_order(("A", "10", 4))

    order.process_activity([FullMinusOne(code="b4g1", threshold=4, skus=["A"])])
    order.process_shipping_fee(Decimal("10.87"))
    order.process_coupon([ProductCoupon(code="c5", amount=Decimal("5"))])
    total = order.process_summary()

    assert order.items_amount == Decimal("40")
    assert order.activity_bonus == Decimal("10")
    assert order.coupon_bonus == Decimal("5")
    assert total == Decimal("35.87")
    assert order.total_amount == total
    assert all(order.summary()["status"].values())


def test_activity_before_items_fails(make_order) -> None:  # noqa: ANN001
    order = make_order(("A", "10", 4), process=False)

    with pytest.raises(StageOrderError):
        order.process_activity([])
    with pytest.raises(StageOrderError):
        order.process_summary()


def test_repeated_stages_do_not_double_count(make_order) -> None:  # noqa: ANN001
    order = make_order(("A", "10", 4))
    rules = [FullMinusOne(code="b4g1", threshold=4, skus=["A"])]
    coupons = [ProductCoupon(code="c5", amount=Decimal("5"))]

    order.process_activity(rules)
    assert order.process_activity(rules) == []
    order.process_coupon(coupons)
    assert order.process_coupon(coupons) == Decimal("0")
    order.process_shipping_fee(Decimal("10"))
    order.process_shipping_fee(Decimal("99"))

    assert order.activity_bonus == Decimal("10")
    assert order.coupon_bonus == Decimal("5")
    assert order.shipping_fee == Decimal("10")


def test_negative_shipping_fee_rejected(make_order) -> None:  # noqa: ANN001
    order = make_order(("A", "10", 1))

    with pytest.raises(ValueError):
        order.process_shipping_fee(Decimal("-1"))


def test_total_may_go_negative(make_order) -> None:  # noqa: ANN001
    order = make_order(("A", "3", 1))
    order.process_coupon([ProductCoupon(code="big", amount=Decimal("10"))])

    assert order.process_summary() == Decimal("-7")


def test_shipping_rules_run_after_fee_is_known(make_order) -> None:  # noqa: ANN001
    order = make_order(("A", "10", 1))
    shipping_half = Bonus(
        code="ship-half",
        apply_object=ShippingFeeTarget(ShippingFeeApplyObjectConfig(bonus_form=PercentForm(Decimal("0.5")))),
    )

    assert order.process_activity([shipping_half]) == []
    outcomes = order.process_shipping_fee(Decimal("8"), [shipping_half], EvaluationContext())

    assert [outcome.code for outcome in outcomes] == ["ship-half"]
    assert order.activity_bonus == Decimal("4")
