from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from cartcalc.config import Settings
from cartcalc.core.shipping import ShippingMethod
from cartcalc.errors import ConfigurationError


def test_settings_defaults(settings: Settings) -> None:
    assert settings.standard_shipping_fee == Decimal("10.87")
    assert settings.expedited_shipping_fee == Decimal("21.77")
    assert settings.currency_quantum == Decimal("0.01")
    assert settings.logs_dir.exists()
    assert settings.exports_dir.exists()


def test_settings_reads_shipping_fees_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CARTCALC_HOME", str(tmp_path))
    monkeypatch.setenv("CARTCALC_STANDARD_SHIPPING_FEE", "4.50")
    monkeypatch.setenv("CARTCALC_EXPEDITED_SHIPPING_FEE", "9")

    settings = Settings.load(base_dir=tmp_path)

    assert settings.root_dir == tmp_path.resolve()
    assert settings.shipping_fees() == {
        ShippingMethod.STANDARD: Decimal("4.50"),
        ShippingMethod.EXPEDITED: Decimal("9"),
    }


@pytest.mark.parametrize("raw", ["abc", "-1"])
def test_settings_rejects_bad_fee(monkeypatch, tmp_path: Path, raw: str) -> None:
    monkeypatch.setenv("CARTCALC_STANDARD_SHIPPING_FEE", raw)

    with pytest.raises(ConfigurationError, match="CARTCALC_STANDARD_SHIPPING_FEE"):
        Settings.load(base_dir=tmp_path)
