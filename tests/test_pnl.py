"""
Tests for the profit & loss roll-up and cashflow summaries.
"""
from pathlib import Path
import pytest
from smartdhandha.models import CashflowEntry, Invoice
from smartdhandha.pnl import cashflow_summary, pnl_expenses, profit_and_loss, statement_for
from smartdhandha.snapshot import load_snapshot

FIX = Path(__file__).parent / "fixtures"


@pytest.fixture
def snapshot():
    return load_snapshot(FIX / "snapshot.json")


def _inv(type, total):
    return Invoice(type=type, date="2024-03-01", customer_name="X", total_grand=total)


def _flow(kind, amount, category="Misc"):
    return CashflowEntry(kind=kind, date="2024-03-01", category=category, amount=amount)


def test_profit_and_loss():
    """Stock purchases recorded as cashflow are not counted twice."""
    expenses = [
        _flow("expense", 500, "Rent"),
        _flow("expense", 300, "Salary"),
        _flow("expense", 2000, "Product Purchase"),
        _flow("income", 5000, "Product Sale"),
    ]
    result = profit_and_loss([_inv("sale", 5000)], [_inv("purchase", 2000)], expenses)
    assert result.total_revenue == 5000
    assert result.cogs == 2000
    assert result.gross_profit == 3000
    assert result.total_expenses == 800
    assert result.net_profit == 2200


def test_empty_inputs():
    result = profit_and_loss([], [], [])
    assert result.model_dump() == {
        "total_revenue": 0, "cogs": 0, "gross_profit": 0, "total_expenses": 0, "net_profit": 0,
    }


def test_loss_is_negative():
    result = profit_and_loss([_inv("sale", 100)], [_inv("purchase", 150)], [_flow("expense", 20.5)])
    assert result.gross_profit == -50
    assert result.net_profit == -70.5


def test_pnl_expenses_filter():
    rows = [_flow("expense", 1, "Rent"), _flow("expense", 2, "Product Purchase"), _flow("income", 3)]
    assert [c.amount for c in pnl_expenses(rows)] == [1]


class TestStatement:
    """Statements over the snapshot fixture."""

    def test_january(self, snapshot):
        result = statement_for(snapshot.invoices, snapshot.cashflows, "2024-01-01", "2024-01-31")
        assert result.total_revenue == 1770
        assert result.cogs == 300
        assert result.gross_profit == 1470
        assert result.total_expenses == 800
        assert result.net_profit == 670

    def test_all_time(self, snapshot):
        result = statement_for(snapshot.invoices, snapshot.cashflows)
        assert result.total_revenue == 2360
        assert result.cogs == 1250
        assert result.total_expenses == 920.75
        assert result.net_profit == 189.25

    def test_camel_case_dump(self, snapshot):
        data = statement_for(snapshot.invoices, snapshot.cashflows, "2024-01-01", "2024-01-31").model_dump(by_alias=True)
        assert data["netProfit"] == 670
        assert data["totalRevenue"] == 1770


class TestCashflowSummary:
    """Income and expense totals keep every category."""

    def test_purchase_expenses_counted(self):
        summary = cashflow_summary([_flow("income", 1000), _flow("expense", 400, "Product Purchase")])
        assert (summary.income, summary.expense, summary.net) == (1000, 400, 600)

    def test_fixture_totals(self, snapshot):
        summary = cashflow_summary(snapshot.cashflows)
        assert summary.income == 1770
        assert summary.expense == 1220.75
        assert summary.net == 549.25

    def test_empty(self):
        assert cashflow_summary([]).net == 0
