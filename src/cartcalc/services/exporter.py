from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Any

import pandas as pd

from cartcalc.core.catalog import round_money
from cartcalc.core.order import Order

SUMMARY_FIELDS = ["items_amount", "activity_bonus", "shipping_fee", "coupon_bonus", "total_amount"]


def breakdown_frames(order: Order, stats: dict[str, Any], quantum: Decimal) -> dict[str, pd.DataFrame]:
    lines = [
        {
            "sku": item.name,
            "unit_price": round_money(item.price, quantum),
            "quantity": quantity,
            "weight": item.weight * quantity,
            "line_amount": round_money(item.price * quantity, quantum),
        }
        for item, quantity in order.items.lines()
    ]
    summary = [{"field": name, "amount": round_money(stats[name], quantum)} for name in SUMMARY_FIELDS]
    rules = [
        {**row, "amount": round_money(row["amount"], quantum)}
        for row in stats.get("rules", [])
    ]
    return {
        "lines": pd.DataFrame(lines, columns=["sku", "unit_price", "quantity", "weight", "line_amount"]),
        "summary": pd.DataFrame(summary, columns=["field", "amount"]),
        "rules": pd.DataFrame(rules, columns=["code", "visibility", "applied", "amount", "reason"]),
    }


def export_breakdown(
    order: Order,
    stats: dict[str, Any],
    formats: list[str],
    out_dir: Path,
    quantum: Decimal = Decimal("0.01"),
) -> list[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    frames = breakdown_frames(order, stats, quantum)

    created_files: list[Path] = []
    if "csv" in formats:
        for name, df in frames.items():
            csv_path = (out_dir / f"cartcalc_{name}.csv").resolve()
            df.to_csv(csv_path, index=False, encoding="utf-8-sig")
            created_files.append(csv_path)

    if "xlsx" in formats:
        xlsx_path = (out_dir / "cartcalc_breakdown.xlsx").resolve()
        with pd.ExcelWriter(xlsx_path, engine="openpyxl") as writer:
            for name, df in frames.items():
                df.to_excel(writer, index=False, sheet_name=name)
        created_files.append(xlsx_path)

    return created_files
