"""
Profit & loss engine.

Purchases are costed through purchase invoices (COGS), so cashflow expenses
in the "Product Purchase" category are left out of the P&L expense total.
Plain cashflow summaries keep them.
"""
from __future__ import annotations
from typing import Iterable, Optional

from .gst import filter_by_date
from .invoices import PURCHASE_CATEGORY
from .models import CamelModel, CashflowEntry, Invoice
from .money import round2


class ProfitAndLoss(CamelModel):
    total_revenue: float = 0.0
    cogs: float = 0.0
    gross_profit: float = 0.0
    total_expenses: float = 0.0
    net_profit: float = 0.0


class CashflowSummary(CamelModel):
    income: float = 0.0
    expense: float = 0.0
    net: float = 0.0


def pnl_expenses(cashflows: Iterable[CashflowEntry]) -> list[CashflowEntry]:
    """Expense entries that count toward P&L (stock purchases excluded)."""
    return [c for c in cashflows if c.kind == "expense" and c.category != PURCHASE_CATEGORY]


def profit_and_loss(
    sales: Iterable[Invoice],
    purchases: Iterable[Invoice],
    expenses: Iterable[CashflowEntry],
) -> ProfitAndLoss:
    """
    Roll up revenue, COGS and expenses.

    ``expenses`` may be any cashflow list: income entries and
    "Product Purchase" expenses are dropped here.
    """
    total_revenue = round2(sum(i.total_grand for i in sales))
    cogs = round2(sum(i.total_grand for i in purchases))
    gross_profit = round2(total_revenue - cogs)
    total_expenses = round2(sum(c.amount for c in pnl_expenses(expenses)))
    return ProfitAndLoss(
        total_revenue=total_revenue,
        cogs=cogs,
        gross_profit=gross_profit,
        total_expenses=total_expenses,
        net_profit=round2(gross_profit - total_expenses),
    )


def statement_for(
    invoices: Iterable[Invoice],
    cashflows: Iterable[CashflowEntry],
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> ProfitAndLoss:
    """P&L over the invoices and cashflows dated within the range."""
    period_invoices = filter_by_date(invoices, date_from, date_to)
    return profit_and_loss(
        sales=[i for i in period_invoices if i.type == "sale"],
        purchases=[i for i in period_invoices if i.type == "purchase"],
        expenses=filter_by_date(cashflows, date_from, date_to),
    )


def cashflow_summary(cashflows: Iterable[CashflowEntry]) -> CashflowSummary:
    rows = list(cashflows)
    income = round2(sum(c.amount for c in rows if c.kind == "income"))
    expense = round2(sum(c.amount for c in rows if c.kind == "expense"))
    return CashflowSummary(income=income, expense=expense, net=round2(income - expense))
