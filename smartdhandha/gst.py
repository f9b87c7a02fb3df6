"""
GST summary engine.

Output GST is collected on sales, input GST is paid on purchases. A
non-negative net is payable to the government; a negative net is an input
tax credit (ITC) position.
"""
from __future__ import annotations
from typing import Iterable, Optional, TypeVar
from pydantic import computed_field

from .models import CamelModel, Invoice
from .money import round2

PAYABLE_LABEL = "Net GST Payable"
ITC_LABEL = "Input Tax Credit"
PAYABLE_NOTE = "Amount payable to government."
ITC_NOTE = "Input Tax Credit (ITC) available."

R = TypeVar("R")


class GSTSummary(CamelModel):
    output_gst: float = 0.0
    input_gst: float = 0.0
    net_gst: float = 0.0
    date_from: Optional[str] = None
    date_to: Optional[str] = None

    @computed_field
    @property
    def is_payable(self) -> bool:
        return self.net_gst >= 0

    @computed_field
    @property
    def label(self) -> str:
        return PAYABLE_LABEL if self.is_payable else ITC_LABEL

    @computed_field
    @property
    def note(self) -> str:
        return PAYABLE_NOTE if self.is_payable else ITC_NOTE


def filter_by_date(records: Iterable[R], date_from: Optional[str] = None, date_to: Optional[str] = None) -> list[R]:
    """
    Keep records whose ``date`` lies in [date_from, date_to].

    Both bounds are inclusive and optional. Comparison is on the stored
    string, so callers must pass YYYY-MM-DD values.
    """
    rows = list(records)
    if date_from:
        rows = [r for r in rows if r.date >= date_from]
    if date_to:
        rows = [r for r in rows if r.date <= date_to]
    return rows


def gst_summary(
    invoices: Iterable[Invoice],
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> GSTSummary:
    in_range = filter_by_date(invoices, date_from, date_to)
    output_gst = round2(sum(i.total_gst or 0 for i in in_range if i.type == "sale"))
    input_gst = round2(sum(i.total_gst or 0 for i in in_range if i.type == "purchase"))
    return GSTSummary(
        output_gst=output_gst,
        input_gst=input_gst,
        net_gst=round2(output_gst - input_gst),
        date_from=date_from or None,
        date_to=date_to or None,
    )
