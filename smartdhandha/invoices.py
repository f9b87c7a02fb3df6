"""
Invoice line and totals engine.

Every derived money field is rounded at the line level first and the invoice
totals are sums of those rounded values, so totals can always be reproduced
from the stored item list alone.
"""
from __future__ import annotations
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional
from loguru import logger

from .models import (
    CamelModel,
    CashflowEntry,
    Invoice,
    InvoiceLineItem,
    Product,
)
from .money import mul2, percent2, round2
from .validators import (
    INVOICE_TYPES,
    ValidationError,
    ensure_choice,
    ensure_non_negative,
    ensure_positive,
    ensure_present,
)

SALE_CATEGORY = "Product Sale"
PURCHASE_CATEGORY = "Product Purchase"


class LineAmounts(CamelModel):
    amount: float = 0.0
    gst_amount: float = 0.0
    line_total: float = 0.0


class InvoiceTotals(CamelModel):
    subtotal: float = 0.0
    total_gst: float = 0.0
    total_grand: float = 0.0


def compute_line(qty: float, price: float, gst_rate: float) -> LineAmounts:
    amount = mul2(qty, price)
    gst_amount = percent2(amount, gst_rate)
    return LineAmounts(
        amount=amount,
        gst_amount=gst_amount,
        line_total=round2(amount + gst_amount),
    )


def compute_invoice_totals(items: Iterable[InvoiceLineItem]) -> InvoiceTotals:
    """Sum of line-rounded amounts; an empty item list gives all zeros."""
    lines = [compute_line(it.qty, it.price, it.gst_rate) for it in items]
    subtotal = round2(sum(ln.amount for ln in lines))
    total_gst = round2(sum(ln.gst_amount for ln in lines))
    return InvoiceTotals(
        subtotal=subtotal,
        total_gst=total_gst,
        total_grand=round2(subtotal + total_gst),
    )


def _validate_line(product_id, qty, price, gst_rate) -> tuple[float, float, float]:
    ensure_present(product_id, "Select a product for the line")
    return (
        ensure_positive(qty, "qty"),
        ensure_non_negative(price, "price"),
        ensure_non_negative(gst_rate, "gst_rate"),
    )


def _line(product_id: str, name: str, qty: float, price: float, gst_rate: float) -> InvoiceLineItem:
    amounts = compute_line(qty, price, gst_rate)
    return InvoiceLineItem(
        product_id=product_id,
        name=name,
        qty=qty,
        price=price,
        gst_rate=gst_rate,
        **amounts.model_dump(),
    )


def make_line(
    product: Optional[Product],
    qty=1,
    price=None,
    gst_rate=None,
) -> InvoiceLineItem:
    """
    New invoice line for a product.

    Price and GST rate default to the product's current unit price and rate.

    Raises:
        ValidationError: no product, qty <= 0, negative price or rate
    """
    if product is None:
        raise ValidationError("Select a product for the line")
    price = product.unit_price if price is None else price
    gst_rate = product.gst_rate if gst_rate is None else gst_rate
    q, p, g = _validate_line(product.id, qty, price, gst_rate)
    return _line(product.id, product.name, q, p, g)


def change_line_product(line: InvoiceLineItem, product: Optional[Product]) -> InvoiceLineItem:
    """Point a line at another product, resetting name, price and GST rate."""
    if product is None:
        raise ValidationError("Select a product for the line")
    q, p, g = _validate_line(product.id, line.qty, product.unit_price, product.gst_rate)
    return _line(product.id, product.name, q, p, g)


def edit_line(line: InvoiceLineItem, qty=None, price=None, gst_rate=None) -> InvoiceLineItem:
    """Manual edit of qty/price/rate; the product reference is kept."""
    q, p, g = _validate_line(
        line.product_id,
        line.qty if qty is None else qty,
        line.price if price is None else price,
        line.gst_rate if gst_rate is None else gst_rate,
    )
    return _line(line.product_id, line.name, q, p, g)


def build_invoice(
    type: str,
    on: str | date,
    customer_name: str,
    items: Iterable[InvoiceLineItem],
    note: str = "",
    id: Optional[str] = None,
) -> Invoice:
    """
    Assemble an invoice from validated lines and stamp its totals.

    Raises:
        ValidationError: unknown type, no counterparty, or no lines
    """
    ensure_choice(type, INVOICE_TYPES, "type")
    party = "customer" if type == "sale" else "supplier"
    ensure_present(on, "Invoice date is required")
    ensure_present(customer_name, f"Select a {party} for the invoice")
    rows = list(items)
    if not rows:
        raise ValidationError("Add at least one item to the invoice")

    lines = [edit_line(r) for r in rows]
    totals = compute_invoice_totals(lines)
    return Invoice(
        id=id,
        type=type,
        date=on,
        customer_name=customer_name.strip(),
        items=lines,
        note=note or "",
        **totals.model_dump(),
    )


def verify_invoice_totals(invoice: Invoice) -> list[str]:
    """
    Compare stored totals with a recomputation from the items.

    Returns the names of mismatching fields (empty when consistent). A
    mismatch is logged as a data-integrity warning; nothing is raised.
    """
    fresh = compute_invoice_totals(invoice.items)
    mismatched = [
        field
        for field in ("subtotal", "total_gst", "total_grand")
        if round2(getattr(invoice, field)) != getattr(fresh, field)
    ]
    if mismatched:
        logger.warning(
            f"Invoice {invoice.id or '(new)'} stored totals disagree with items: "
            + ", ".join(f"{f} {getattr(invoice, f)} != {getattr(fresh, f)}" for f in mismatched)
        )
    return mismatched


def recompute_invoice(invoice: Invoice) -> Invoice:
    """Copy of the invoice with fresh line amounts and totals."""
    lines = [
        line.model_copy(update=compute_line(line.qty, line.price, line.gst_rate).model_dump())
        for line in invoice.items
    ]
    totals = compute_invoice_totals(lines)
    return invoice.model_copy(update={"items": lines, **totals.model_dump()})


# ---------------- Posting side effects ----------------

def _qty_by_product(invoice: Invoice) -> dict[str, float]:
    used: dict[str, float] = defaultdict(float)
    for line in invoice.items:
        used[line.product_id] += line.qty
    return used


def _adjust_stock(products: Iterable[Product], invoice: Invoice, direction: int) -> list[Product]:
    """
    Raises:
        ValidationError: a stocked product is moved by a fractional quantity
    """
    used = _qty_by_product(invoice)
    sign = -1 if invoice.type == "sale" else 1
    rows = list(products)
    for p in rows:
        if p.id in used and not float(used[p.id]).is_integer():
            raise ValidationError(f"Stock of {p.name} moves in whole units (got qty {used[p.id]})")

    out = []
    for p in rows:
        if p.id not in used:
            out.append(p)
            continue
        stock = max(0, p.stock + direction * sign * int(used[p.id]))
        out.append(p.model_copy(update={"stock": stock}))
    return out


def apply_stock(products: Iterable[Product], invoice: Invoice) -> list[Product]:
    """Stock after posting: sales decrement, purchases increment; never below 0."""
    return _adjust_stock(products, invoice, 1)


def revert_stock(products: Iterable[Product], invoice: Invoice) -> list[Product]:
    """Stock after deleting a posted invoice."""
    return _adjust_stock(products, invoice, -1)


def settlement_note(invoice: Invoice) -> str:
    kind = "Sale" if invoice.type == "sale" else "Purchase"
    return f"{kind} invoice - {invoice.customer_name}"


def settlement_entry(invoice: Invoice) -> CashflowEntry:
    """The one cashflow entry posted alongside an invoice."""
    is_sale = invoice.type == "sale"
    return CashflowEntry(
        kind="income" if is_sale else "expense",
        date=invoice.date,
        category=SALE_CATEGORY if is_sale else PURCHASE_CATEGORY,
        amount=invoice.total_grand,
        note=settlement_note(invoice),
        invoice_id=invoice.id,
    )


def linked_cashflows(invoice: Invoice, cashflows: Iterable[CashflowEntry]) -> list[CashflowEntry]:
    """
    Cashflow entries that settle this invoice.

    Entries carrying an ``invoice_id`` are matched by id only. Older entries
    without one fall back to matching date, note and amount, which cannot tell
    apart two same-day invoices to one party for the same amount.
    """
    note = settlement_note(invoice)
    found = []
    for c in cashflows:
        if c.invoice_id:
            if invoice.id and c.invoice_id == invoice.id:
                found.append(c)
        elif c.date == invoice.date and (c.note or "") == note and round2(c.amount) == round2(invoice.total_grand):
            logger.debug(f"Matched legacy cashflow {c.id} to invoice {invoice.id} by date/note/amount")
            found.append(c)
    return found
