from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path

from dotenv import load_dotenv

from cartcalc.core.shipping import ShippingMethod
from cartcalc.errors import ConfigurationError

DEFAULT_STANDARD_SHIPPING_FEE = Decimal("10.87")
DEFAULT_EXPEDITED_SHIPPING_FEE = Decimal("21.77")
DEFAULT_CURRENCY_QUANTUM = Decimal("0.01")


def _env_decimal(name: str, default: Decimal) -> Decimal:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = Decimal(raw.strip())
    except InvalidOperation as exc:
        raise ConfigurationError(f"not a decimal value: {raw!r}", field=name) from exc
    if value < 0:
        raise ConfigurationError(f"must not be negative: {raw!r}", field=name)
    return value


@dataclass(slots=True)
class Settings:
    root_dir: Path
    logs_dir: Path
    exports_dir: Path
    standard_shipping_fee: Decimal = DEFAULT_STANDARD_SHIPPING_FEE
    expedited_shipping_fee: Decimal = DEFAULT_EXPEDITED_SHIPPING_FEE
    currency_quantum: Decimal = DEFAULT_CURRENCY_QUANTUM
    log_level: str = "INFO"

    @classmethod
    def load(cls, base_dir: Path | None = None) -> Settings:
        load_dotenv(override=False)

        root_env = os.getenv("CARTCALC_HOME")
        root_dir = Path(root_env).expanduser().resolve() if root_env else (base_dir or Path.cwd()).resolve()

        logs_dir = Path(os.getenv("CARTCALC_LOG_DIR", root_dir / "logs")).expanduser().resolve()
        exports_dir = Path(os.getenv("CARTCALC_EXPORT_DIR", root_dir / "exports")).expanduser().resolve()

        currency_quantum = _env_decimal("CARTCALC_CURRENCY_QUANTUM", DEFAULT_CURRENCY_QUANTUM)
        if currency_quantum == 0:
            raise ConfigurationError("must be positive", field="CARTCALC_CURRENCY_QUANTUM")

        return cls(
            root_dir=root_dir,
            logs_dir=logs_dir,
            exports_dir=exports_dir,
            standard_shipping_fee=_env_decimal("CARTCALC_STANDARD_SHIPPING_FEE", DEFAULT_STANDARD_SHIPPING_FEE),
            expedited_shipping_fee=_env_decimal("CARTCALC_EXPEDITED_SHIPPING_FEE", DEFAULT_EXPEDITED_SHIPPING_FEE),
            currency_quantum=currency_quantum,
            log_level=os.getenv("CARTCALC_LOG_LEVEL", "INFO"),
        )

    def shipping_fees(self) -> dict[ShippingMethod, Decimal]:
        return {
            ShippingMethod.STANDARD: self.standard_shipping_fee,
            ShippingMethod.EXPEDITED: self.expedited_shipping_fee,
        }

    def ensure_directories(self) -> None:
        for path in [self.root_dir, self.logs_dir, self.exports_dir]:
            path.mkdir(parents=True, exist_ok=True)
