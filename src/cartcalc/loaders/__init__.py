from .checkout_file import CheckoutRequest, load_checkout, parse_checkout
from .sample import build_sample_checkout

__all__ = ["CheckoutRequest", "load_checkout", "parse_checkout", "build_sample_checkout"]
