from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Protocol


class ShippingMethod(str, Enum):
    STANDARD = "standard"
    EXPEDITED = "expedited"

    @property
    def id(self) -> int:
        return 1 if self is ShippingMethod.STANDARD else 2


@dataclass(frozen=True, slots=True)
class Region:
    region_id: int = 0
    region_code: str = ""
    region_name: str = ""


@dataclass(frozen=True, slots=True)
class Address:
    country: Region = field(default_factory=Region)
    province: Region = field(default_factory=Region)
    city: Region = field(default_factory=Region)
    zip_code: str = ""


class ShippingCalculator(Protocol):
    def fee(self, method: ShippingMethod, address: Address, weight: int) -> Decimal: ...


class FlatRateShipping:
    """
    One fixed fee per shipping method. Address and parcel weight are accepted
    so table-based calculators can share the interface, but do not affect the fee.
    """

    def __init__(self, fees: Mapping[ShippingMethod, Decimal]):
        missing = [method.value for method in ShippingMethod if method not in fees]
        if missing:
            raise ValueError(f"No shipping fee configured for: {', '.join(missing)}")
        self._fees = dict(fees)

    def fee(self, method: ShippingMethod, address: Address, weight: int) -> Decimal:
        return self._fees[method]
