"""
Command line reports over a backend snapshot.

Usage:
    # Ledger for every customer, or one customer
    python -m smartdhandha ledger --data snapshot.json
    python -m smartdhandha ledger --data snapshot.json --customer c1 --search upi

    # GST and P&L for a period (inclusive dates)
    python -m smartdhandha gst --from 2024-04-01 --to 2024-06-30
    python -m smartdhandha pnl --from 2024-04-01 --to 2024-06-30 --json

    # Stock tracking and dashboard
    python -m smartdhandha stock --search cable
    python -m smartdhandha dashboard

    # Invoices whose stored totals disagree with their items
    python -m smartdhandha check

The snapshot path defaults to SD_SNAPSHOT_PATH.
"""
from __future__ import annotations
import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import Optional
from loguru import logger

from . import ledger, render
from .config import AppConfig
from .gst import gst_summary
from .invoices import verify_invoice_totals
from .pnl import statement_for
from .reports import business_totals, low_stock, search_products, stock_value
from .snapshot import Snapshot, SnapshotError, load_snapshot
from .validators import ValidationError

COMMANDS = ("ledger", "gst", "pnl", "stock", "dashboard", "check")


def _iso_date(s: str) -> str:
    """argparse type: validate YYYY-MM-DD and keep it as a string."""
    try:
        return date.fromisoformat(s).isoformat()
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {s!r}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smartdhandha",
        description="SmartDhandha business reports from a backend snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("command", choices=COMMANDS, help="Report to produce")
    parser.add_argument(
        "--data",
        type=Path,
        help="Snapshot JSON file (default: SD_SNAPSHOT_PATH)",
    )
    parser.add_argument("--from", dest="date_from", type=_iso_date, help="Start date, inclusive (YYYY-MM-DD)")
    parser.add_argument("--to", dest="date_to", type=_iso_date, help="End date, inclusive (YYYY-MM-DD)")
    parser.add_argument("--customer", help="Customer id for the ledger report")
    parser.add_argument("--search", default="", help="Free-text filter (ledger, stock)")
    parser.add_argument("--json", action="store_true", help="Print figures as JSON instead of text")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress log output except errors")
    return parser


def configure_logging(config: AppConfig, verbose: bool = False, quiet: bool = False) -> None:
    logger.remove()
    if quiet:
        level = "ERROR"
    elif verbose:
        level = "DEBUG"
    else:
        level = config.log_level.upper()
    logger.add(sys.stderr, level=level)
    if config.log_file:
        logger.add(config.log_file, level="DEBUG", rotation="10 MB")


def _figures(args: argparse.Namespace, snapshot: Snapshot) -> dict:
    """The numbers behind a report, for --json output."""
    if args.command == "ledger":
        if args.customer:
            rows = ledger.customer_transactions(snapshot.transactions, args.customer)
            rows = ledger.search_transactions(rows, args.search)
        else:
            rows = ledger.search_transactions(snapshot.transactions, args.search, customers=snapshot.customers)
        result = {"summary": ledger.summarize(rows).model_dump(by_alias=True)}
        if not args.customer:
            result["customers"] = [
                c.model_dump(by_alias=True)
                for c in ledger.customer_balances(snapshot.customers, snapshot.transactions)
            ]
        return result
    if args.command == "gst":
        return gst_summary(snapshot.invoices, args.date_from, args.date_to).model_dump(by_alias=True)
    if args.command == "pnl":
        return statement_for(snapshot.invoices, snapshot.cashflows, args.date_from, args.date_to).model_dump(by_alias=True)
    if args.command == "stock":
        products = search_products(snapshot.products, args.search)
        return {
            "stockValue": stock_value(products),
            "lowStock": [p.model_dump(by_alias=True) for p in low_stock(products)],
        }
    if args.command == "dashboard":
        return business_totals(snapshot.invoices, snapshot.products, snapshot.cashflows).model_dump(by_alias=True)
    return {"inconsistent": [i.id for i in snapshot.invoices if verify_invoice_totals(i)]}


def _text(args: argparse.Namespace, snapshot: Snapshot, symbol: str) -> str:
    if args.command == "ledger":
        return render.render_ledger(snapshot, args.customer, args.search, symbol=symbol)
    if args.command == "gst":
        return render.render_gst(snapshot, args.date_from, args.date_to, symbol=symbol)
    if args.command == "pnl":
        return render.render_pnl(snapshot, args.date_from, args.date_to, symbol=symbol)
    if args.command == "stock":
        return render.render_stock(snapshot, args.search, symbol=symbol)
    if args.command == "dashboard":
        return render.render_dashboard(snapshot, symbol=symbol)
    bad = [i for i in snapshot.invoices if verify_invoice_totals(i)]
    if not bad:
        return f"All {len(snapshot.invoices)} invoices consistent."
    return "\n".join(f"{i.id or '(no id)'}  {i.date}  {i.customer_name}" for i in bad)


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = AppConfig.from_env()
    if args.data:
        config.snapshot_path = args.data
    configure_logging(config, verbose=args.verbose, quiet=args.quiet)

    errors = config.validate()
    if errors:
        for err in errors:
            logger.error(f"Configuration error: {err}")
        return 1

    if args.date_from and args.date_to and args.date_from > args.date_to:
        logger.error(f"--from {args.date_from} is after --to {args.date_to}")
        return 1

    try:
        # The check command reports mismatches itself
        snapshot = load_snapshot(config.snapshot_path, check_totals=config.check_totals and args.command != "check")
        if args.customer and args.command == "ledger":
            ledger.ensure_customer(snapshot.customers, args.customer)

        if args.json:
            print(json.dumps(_figures(args, snapshot), indent=2, ensure_ascii=False))
        else:
            print(_text(args, snapshot, symbol=f"{config.currency_symbol} " if config.currency_symbol else ""))
        return 0

    except SnapshotError as e:
        logger.error(f"Snapshot error: {e}")
        return 1

    except ValidationError as e:
        logger.error(f"Invalid input: {e}")
        return 1

    except KeyboardInterrupt:
        return 130

    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1
