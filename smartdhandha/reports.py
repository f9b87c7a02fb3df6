"""
Business reports built on the engines: dashboard KPIs, stock tracking,
cashflow search, customer history and the visitor log.
"""
from __future__ import annotations
from datetime import datetime
from typing import Iterable, Optional

from .gst import gst_summary
from .models import CamelModel, CashflowEntry, Customer, Invoice, Product, Visitor
from .money import round2
from .pnl import cashflow_summary


class BusinessTotals(CamelModel):
    total_sales: float = 0.0
    total_purchases: float = 0.0
    output_gst: float = 0.0
    input_gst: float = 0.0
    net_gst: float = 0.0
    stock_value: float = 0.0
    income: float = 0.0
    expense: float = 0.0


class VisitorStats(CamelModel):
    total: int = 0
    inside: int = 0
    exited: int = 0


def stock_value(products: Iterable[Product]) -> float:
    return round2(sum(p.unit_price * p.stock for p in products))


def low_stock(products: Iterable[Product]) -> list[Product]:
    """Products at or below their low-stock threshold, lowest stock first."""
    return sorted((p for p in products if p.stock <= p.low_stock), key=lambda p: (p.stock, p.name))


def search_products(products: Iterable[Product], query: str) -> list[Product]:
    q = (query or "").strip().lower()
    return [p for p in products if q in p.name.lower()]


def business_totals(
    invoices: Iterable[Invoice],
    products: Iterable[Product],
    cashflows: Iterable[CashflowEntry],
) -> BusinessTotals:
    """Headline figures over all records, without date filtering."""
    invoices = list(invoices)
    gst = gst_summary(invoices)
    flows = cashflow_summary(cashflows)
    return BusinessTotals(
        total_sales=round2(sum(i.total_grand for i in invoices if i.type == "sale")),
        total_purchases=round2(sum(i.total_grand for i in invoices if i.type == "purchase")),
        output_gst=gst.output_gst,
        input_gst=gst.input_gst,
        net_gst=gst.net_gst,
        stock_value=stock_value(products),
        income=flows.income,
        expense=flows.expense,
    )


def search_cashflows(
    cashflows: Iterable[CashflowEntry],
    query: str,
    invoices: Iterable[Invoice] = (),
) -> list[CashflowEntry]:
    """
    Match category, note, or the party of the linked invoice.

    Results are newest first; an empty query returns every entry.
    """
    rows = list(cashflows)
    q = (query or "").strip().lower()
    if q:
        parties = {i.id: i.customer_name for i in invoices if i.id}

        def matches(c: CashflowEntry) -> bool:
            party = parties.get(c.invoice_id) if c.invoice_id else None
            if party and q in party.lower():
                return True
            return q in (c.category or "").lower() or q in (c.note or "").lower()

        rows = [c for c in rows if matches(c)]
    return sorted(rows, key=lambda c: c.date, reverse=True)


def customer_sales(invoices: Iterable[Invoice], customer_name: str) -> list[Invoice]:
    """Sale invoices issued to a customer, matched on the stored party name."""
    return [i for i in invoices if i.type == "sale" and i.customer_name == customer_name]


def can_delete_customer(customer: Customer, invoices: Iterable[Invoice]) -> bool:
    """A customer with invoices under their name must be kept."""
    return not any(i.customer_name == customer.name for i in invoices)


def visitor_stats(visitors: Iterable[Visitor]) -> VisitorStats:
    rows = list(visitors)
    return VisitorStats(
        total=len(rows),
        inside=sum(1 for v in rows if v.status == "Inside"),
        exited=sum(1 for v in rows if v.status == "Exited"),
    )


def check_out(visitor: Visitor, when: Optional[datetime] = None) -> Visitor:
    return visitor.model_copy(update={
        "status": "Exited",
        "check_out_time": (when or datetime.now()).isoformat(timespec="seconds"),
    })
