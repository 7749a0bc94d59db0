from __future__ import annotations

import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import typer
from dateutil import parser as dt_parser
from rich import print

from cartcalc.config import Settings
from cartcalc.core.catalog import round_money
from cartcalc.core.logging import configure_logging, get_logger
from cartcalc.errors import CartCalcError
from cartcalc.loaders import CheckoutRequest, build_sample_checkout, load_checkout
from cartcalc.services import CheckoutPipeline, export_breakdown

app = typer.Typer(no_args_is_help=True, help="cartcalc CLI: price a checkout cart")

EXPORT_FORMATS = {"csv", "xlsx"}


def _load_settings(base_dir: Path | None = None) -> Settings:
    settings = Settings.load(base_dir=base_dir)
    settings.ensure_directories()
    return settings


def _parse_at(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = dt_parser.parse(value)
    except (ValueError, OverflowError) as exc:
        raise typer.BadParameter(f"Invalid timestamp: {value}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_formats(value: str | None) -> list[str]:
    if not value:
        return []
    formats = [item.strip().lower() for item in value.split(",") if item.strip()]
    unknown = [item for item in formats if item not in EXPORT_FORMATS]
    if unknown:
        raise typer.BadParameter(f"Unsupported export formats: {unknown}")
    return formats


def _print_breakdown(settings: Settings, stats: dict[str, Any]) -> None:
    quantum = settings.currency_quantum

    def money(value: Any) -> str:
        return str(round_money(value, quantum))

    print(f"Items: {stats['items_count']} units, [bold]{money(stats['items_amount'])}[/bold]")
    for rule in stats["rules"]:
        if rule["visibility"] == "hidden":
            continue
        if rule["applied"]:
            print(f"- [green]{rule['code']}[/green]: -{money(rule['amount'])}")
        else:
            print(f"- [yellow]{rule['code']}[/yellow]: skipped ({rule['reason']})")
    print(f"Activity bonus: -{money(stats['activity_bonus'])}")
    print(f"Shipping ({stats['shipping_method']}): {money(stats['shipping_fee'])}")
    print(f"Coupon bonus: -{money(stats['coupon_bonus'])}")
    print(f"[bold]Total: {money(stats['total_amount'])}[/bold]")


def _price(request: CheckoutRequest, at: datetime | None, export: str | None, out: Path | None) -> None:
    formats = _parse_formats(export)
    correlation_id = uuid.uuid4().hex

    settings = _load_settings()
    configure_logging(settings.logs_dir, correlation_id=correlation_id, level=settings.log_level, console=False)
    logger = get_logger("cartcalc.checkout", correlation_id)

    pipeline = CheckoutPipeline(settings=settings, logger=logger)
    stats = pipeline.run(request, now=at)
    _print_breakdown(settings, stats)

    if formats:
        out_dir = (out or settings.exports_dir).resolve()
        files = export_breakdown(request.order, stats, formats, out_dir, quantum=settings.currency_quantum)
        print("[green]Export finished[/green]")
        for file_path in files:
            print(f"- {file_path}")
    print(f"correlation_id={correlation_id}")


@app.command("demo")
def demo_command(
    export: str | None = typer.Option(None, help="Export formats, comma separated: csv,xlsx"),
    out: Path | None = typer.Option(None, help="Export directory"),
) -> None:
    """Price the bundled sample cart."""
    try:
        _price(build_sample_checkout(), at=None, export=export, out=out)
    except CartCalcError as exc:
        print(f"[red]Error[/red]: {exc}")
        raise typer.Exit(1) from exc


@app.command("quote")
def quote_command(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Checkout JSON file"),
    at: str | None = typer.Option(None, help="Evaluate time windows at this moment (default: now)"),
    export: str | None = typer.Option(None, help="Export formats, comma separated: csv,xlsx"),
    out: Path | None = typer.Option(None, help="Export directory"),
) -> None:
    """Price a checkout described by a JSON file."""
    at_dt = _parse_at(at)
    try:
        _price(load_checkout(path), at=at_dt, export=export, out=out)
    except CartCalcError as exc:
        print(f"[red]Error[/red]: {exc}")
        raise typer.Exit(1) from exc


if __name__ == "__main__":
    app()
