from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path

import pytest

from cartcalc.config import Settings
from cartcalc.core.catalog import BoughtSet, CatalogItem
from cartcalc.core.order import Order


@pytest.fixture()
def settings(tmp_path: Path, monkeypatch) -> Settings:  # noqa: ANN001
    root = tmp_path / "project"
    root.mkdir(parents=True, exist_ok=True)
    for name in [
        "CARTCALC_HOME",
        "CARTCALC_LOG_DIR",
        "CARTCALC_EXPORT_DIR",
        "CARTCALC_STANDARD_SHIPPING_FEE",
        "CARTCALC_EXPEDITED_SHIPPING_FEE",
        "CARTCALC_CURRENCY_QUANTUM",
        "CARTCALC_LOG_LEVEL",
    ]:
        monkeypatch.delenv(name, raising=False)
    s = Settings.load(base_dir=root)
    s.ensure_directories()
    return s


@pytest.fixture()
def test_logger() -> logging.Logger:
    logger = logging.getLogger("cartcalc-test")
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.INFO)
    return logger


@pytest.fixture()
def make_order():
    def _make(*lines: tuple[str, str, int], process: bool = True) -> Order:
        items = BoughtSet((CatalogItem(name=name, price=Decimal(price)), quantity) for name, price, quantity in lines)
        order = Order(items=items)
        if process:
            order.process_items()
        return order

    return _make
