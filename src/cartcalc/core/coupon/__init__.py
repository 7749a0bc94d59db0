from .models import ProductCoupon

__all__ = ["ProductCoupon"]
