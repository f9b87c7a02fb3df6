"""
Tests for the GST summary and date range filter.
"""
from pathlib import Path
import pytest
from smartdhandha.gst import filter_by_date, gst_summary
from smartdhandha.models import Invoice
from smartdhandha.snapshot import load_snapshot

FIX = Path(__file__).parent / "fixtures"


@pytest.fixture
def invoices():
    return load_snapshot(FIX / "snapshot.json").invoices


def _inv(type, total_gst, on="2024-01-01"):
    return Invoice(type=type, date=on, customer_name="X", total_gst=total_gst)


def test_january_summary(invoices):
    summary = gst_summary(invoices, "2024-01-01", "2024-01-31")
    assert summary.output_gst == 270
    assert summary.input_gst == 50
    assert summary.net_gst == 220
    assert summary.is_payable
    assert summary.label == "Net GST Payable"
    assert summary.note == "Amount payable to government."


def test_all_time_summary(invoices):
    summary = gst_summary(invoices)
    assert (summary.output_gst, summary.input_gst, summary.net_gst) == (360, 194, 166)
    assert summary.date_from is None and summary.date_to is None


def test_input_tax_credit_position():
    summary = gst_summary([_inv("sale", 90), _inv("purchase", 144)])
    assert summary.net_gst == -54
    assert not summary.is_payable
    assert summary.label == "Input Tax Credit"
    assert summary.note == "Input Tax Credit (ITC) available."


def test_no_invoices_is_zero_and_payable():
    summary = gst_summary([])
    assert (summary.output_gst, summary.input_gst, summary.net_gst) == (0, 0, 0)
    assert summary.is_payable


def test_summary_dump_includes_position():
    data = gst_summary([_inv("sale", 18)]).model_dump(by_alias=True)
    assert data["outputGst"] == 18
    assert data["isPayable"] is True
    assert data["label"] == "Net GST Payable"


class TestFilterByDate:
    """Inclusive, optional date bounds."""

    def test_bounds_are_inclusive(self, invoices):
        rows = filter_by_date(invoices, "2024-01-10", "2024-01-31")
        assert [i.id for i in rows] == ["i1", "i2", "i3"]

    def test_day_after_range_excluded(self, invoices):
        rows = filter_by_date(invoices, "2024-01-01", "2024-01-31")
        assert "i4" not in [i.id for i in rows]

    def test_open_start(self, invoices):
        assert [i.id for i in filter_by_date(invoices, date_to="2024-01-15")] == ["i1", "i3"]

    def test_open_end(self, invoices):
        assert [i.id for i in filter_by_date(invoices, date_from="2024-02-01")] == ["i4", "i5"]

    def test_no_bounds_keeps_everything(self, invoices):
        assert len(filter_by_date(invoices)) == 5
