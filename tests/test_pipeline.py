from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from cartcalc.core.shipping import FlatRateShipping, ShippingMethod
from cartcalc.loaders import build_sample_checkout, parse_checkout
from cartcalc.services import CheckoutPipeline


def test_sample_checkout_totals(settings, test_logger) -> None:  # noqa: ANN001
    stats = CheckoutPipeline(settings=settings, logger=test_logger).run(build_sample_checkout())

    assert stats["items_amount"] == Decimal("2114.44")
    assert stats["activity_bonus"] == Decimal("13.97")
    assert stats["shipping_fee"] == Decimal("10.87")
    assert stats["coupon_bonus"] == Decimal("5")
    assert stats["total_amount"] == Decimal("2106.34")
    assert stats["rules_applied"] == 1
    assert stats["rules_skipped"] == 1
    assert [row["code"] for row in stats["rules"]] == ["full-4-minus-1", "3-for-50"]


def test_expedited_shipping_and_hidden_rules(settings, test_logger) -> None:  # noqa: ANN001
    request = parse_checkout(
        {
            "catalog": [{"sku": "A", "price": "20"}],
            "cart": [{"sku": "A", "quantity": 2}],
            "bonuses": [
                {
                    "code": "spring",
                    "form": {"type": "amount", "value": "5"},
                    "time": {"start": "2026-03-01T00:00:00Z", "end": "2026-04-01T00:00:00Z"},
                    "visibility": "hidden",
                },
                {
                    "code": "free-ship",
                    "target": "shipping_fee",
                    "form": {"type": "percent", "rate": "1"},
                    "condition": {"type": "count", "threshold": 1},
                },
            ],
            "shipping": {"method": "expedited"},
        }
    )

    stats = CheckoutPipeline(settings=settings, logger=test_logger).run(
        request, now=datetime(2026, 3, 15, tzinfo=timezone.utc)
    )

    assert stats["shipping_method"] == "expedited"
    assert stats["shipping_fee"] == Decimal("21.77")
    assert stats["activity_bonus"] == Decimal("26.77")
    assert stats["total_amount"] == Decimal("35")
    assert {row["code"]: row["visibility"] for row in stats["rules"]} == {
        "spring": "hidden",
        "free-ship": "visible",
    }


def test_ineligible_rules_do_not_abort(settings, test_logger) -> None:  # noqa: ANN001
    request = parse_checkout(
        {
            "catalog": [{"sku": "A", "price": "20"}],
            "cart": [{"sku": "A", "quantity": 1}],
            "bonuses": [
                {
                    "code": "later",
                    "form": {"type": "amount", "value": "5"},
                    "time": {"start": "2030-01-01T00:00:00Z"},
                }
            ],
        }
    )

    stats = CheckoutPipeline(settings=settings, logger=test_logger).run(request)

    assert stats["rules_skipped"] == 1
    assert stats["rules"][0]["reason"] == "outside time window"
    assert stats["total_amount"] == Decimal("30.87")


def test_pipeline_uses_given_shipping_calculator(settings, test_logger) -> None:  # noqa: ANN001
    shipping = FlatRateShipping({ShippingMethod.STANDARD: Decimal("3"), ShippingMethod.EXPEDITED: Decimal("9")})

    stats = CheckoutPipeline(settings, test_logger, shipping).run(build_sample_checkout())

    assert stats["shipping_fee"] == Decimal("3")
    assert stats["total_amount"] == Decimal("2098.47")
