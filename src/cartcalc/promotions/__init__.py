from .base import Activity
from .fixed_price import FixedPrice
from .full_minus_one import FullMinusOne

__all__ = ["Activity", "FullMinusOne", "FixedPrice"]
