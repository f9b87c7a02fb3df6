"""
Plain-text report rendering.

Each report is a jinja2 template under ``templates/``; the functions here
compute the figures through the engines and hand them to the template.
"""
from __future__ import annotations
from datetime import date
from functools import partial
from pathlib import Path
from typing import Optional
from jinja2 import Template

from . import ledger
from .gst import filter_by_date, gst_summary
from .money import format_currency
from .pnl import cashflow_summary, statement_for
from .reports import business_totals, low_stock, search_products, stock_value, visitor_stats
from .snapshot import Snapshot

TEMPLATES_DIR = Path(__file__).parent / "templates"


def _load_template(template_name: str) -> str:
    template_path = TEMPLATES_DIR / template_name
    if not template_path.exists():
        raise FileNotFoundError(f"Template not found: {template_path}")
    return template_path.read_text(encoding="utf-8")


def _render(template_name: str, symbol: str = "", **context) -> str:
    template = Template(_load_template(template_name))
    return template.render(money=partial(format_currency, symbol=symbol), **context)


def render_ledger(
    snapshot: Snapshot,
    customer_id: Optional[str] = None,
    query: str = "",
    symbol: str = "",
    today: Optional[date] = None,
) -> str:
    """Ledger for one customer, or for everyone when customer_id is None."""
    names = {c.id: c.name for c in snapshot.customers}
    if customer_id:
        rows = ledger.customer_transactions(snapshot.transactions, customer_id)
        rows = ledger.search_transactions(rows, query)
        title = ledger.customer_name(snapshot.customers, customer_id)
        cards = []
        reminders = ledger.customer_reminders(snapshot.reminders, customer_id)
    else:
        rows = ledger.search_transactions(snapshot.transactions, query, customers=snapshot.customers)
        title = "All customers"
        cards = ledger.customer_balances(snapshot.customers, snapshot.transactions)
        reminders = []

    return _render(
        "ledger.txt.j2",
        symbol=symbol,
        title=title,
        query=query,
        rows=rows,
        names=names,
        show_names=customer_id is None,
        summary=ledger.summarize(rows),
        cards=cards,
        reminders=reminders,
        due=partial(ledger.due_status, today=today),
    )


def render_gst(
    snapshot: Snapshot,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    symbol: str = "",
) -> str:
    invoices = sorted(filter_by_date(snapshot.invoices, date_from, date_to), key=lambda i: i.date, reverse=True)
    return _render(
        "gst.txt.j2",
        symbol=symbol,
        invoices=invoices,
        summary=gst_summary(snapshot.invoices, date_from, date_to),
    )


def render_pnl(
    snapshot: Snapshot,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    symbol: str = "",
) -> str:
    return _render(
        "pnl.txt.j2",
        symbol=symbol,
        date_from=date_from,
        date_to=date_to,
        statement=statement_for(snapshot.invoices, snapshot.cashflows, date_from, date_to),
        flows=cashflow_summary(filter_by_date(snapshot.cashflows, date_from, date_to)),
    )


def render_stock(snapshot: Snapshot, query: str = "", symbol: str = "") -> str:
    products = search_products(snapshot.products, query)
    return _render(
        "stock.txt.j2",
        symbol=symbol,
        query=query,
        products=products,
        total_value=stock_value(products),
        low=low_stock(products),
    )


def render_dashboard(snapshot: Snapshot, symbol: str = "") -> str:
    return _render(
        "dashboard.txt.j2",
        symbol=symbol,
        totals=business_totals(snapshot.invoices, snapshot.products, snapshot.cashflows),
        counts=snapshot.counts(),
        visitors=visitor_stats(snapshot.visitors),
        low=low_stock(snapshot.products),
    )
