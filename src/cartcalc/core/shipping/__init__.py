from .methods import Address, FlatRateShipping, Region, ShippingCalculator, ShippingMethod

__all__ = ["Address", "Region", "ShippingMethod", "ShippingCalculator", "FlatRateShipping"]
