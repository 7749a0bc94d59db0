from __future__ import annotations

from decimal import Decimal

from cartcalc.core.catalog import BoughtSet, CatalogItem
from cartcalc.core.coupon import ProductCoupon
from cartcalc.core.order import Order
from cartcalc.core.shipping import ShippingMethod
from cartcalc.promotions import FixedPrice, FullMinusOne

from .checkout_file import CheckoutRequest

# sku, shop price, market price, quantity, weight
SAMPLE_LINES = [
    ("10001200014432300015987", "5.99", "7.99", 3, 200),
    ("10001200024432300015938", "3.99", "4.99", 2, 200),
    ("10001200026432300015938", "5.99", "8.99", 3, 200),
    ("10001200026432300015939", "12.99", "16.99", 4, 200),
    ("10001200026432300025938", "90.99", "100.99", 5, 200),
    ("10001200076432300025938", "23.99", "26.99", 6, 200),
    ("10001200076432300025934", "56.99", "70.99", 7, 200),
    ("10001200076432300035934", "77.99", "168.99", 8, 200),
    ("10001200076432300045934", "89.99", "100.99", 1, 200),
    ("10001200076412300025984", "16.99", "23.99", 2, 200),
    ("10001200074412300015984", "30.99", "33.99", 3, 200),
    ("10001200074412300010984", "12.99", "15.99", 4, 200),
    ("10001200074412400010984", "14.99", "17.99", 5, 200),
    ("10001200024412300010984", "16.99", "19.99", 1, 200),
    ("10001200024412300010988", "17.99", "22.99", 2, 200),
]

FULL_MINUS_ONE_SKUS = [
    "10001200024432300015938",
    "10001200026432300015938",
    "10001200026432300015939",
    "10001200074412300015984",
]

FIXED_PRICE_SKUS = [
    "10001200076432300025934",
    "10001200076432300035934",
    "10001200024412300010988",
]


def build_sample_checkout() -> CheckoutRequest:
    items = BoughtSet(
        (CatalogItem(name=sku, price=Decimal(price), weight=weight, market_price=Decimal(market)), quantity)
        for sku, price, market, quantity, weight in SAMPLE_LINES
    )
    return CheckoutRequest(
        order=Order(items=items),
        rules=[
            FullMinusOne(code="full-4-minus-1", threshold=4, skus=FULL_MINUS_ONE_SKUS),
            FixedPrice(code="3-for-50", threshold=3, price=Decimal("50.00"), skus=FIXED_PRICE_SKUS),
        ],
        coupons=[ProductCoupon(code="product-5", amount=Decimal("5"))],
        shipping_method=ShippingMethod.STANDARD,
    )
