"""
Ledger balance engine.

Balances follow the khata convention: a ``credit`` entry is an amount the
customer now owes the business, a ``debit`` entry is a payment against it.
A positive balance is shown as "Aap Denge", a negative one as "Aapko Milenge".
"""
from __future__ import annotations
from datetime import date
from typing import Iterable, Optional
from loguru import logger

from .models import CamelModel, Customer, LedgerTransaction, Reminder
from .money import round2
from .validators import (
    TRANSACTION_TYPES,
    ValidationError,
    ensure_choice,
    ensure_positive,
    ensure_present,
)

PAYABLE_LABEL = "Aap Denge"
RECEIVABLE_LABEL = "Aapko Milenge"
OPENING_BALANCE_NOTE = "Opening balance"
UNKNOWN_CUSTOMER = "N/A"
NO_DUE_DATE = "No due date"


class LedgerSummary(CamelModel):
    total_credit: float = 0.0
    total_debit: float = 0.0
    balance: float = 0.0
    label: str = PAYABLE_LABEL
    count: int = 0


class CustomerBalance(CamelModel):
    customer_id: str
    name: str
    phone: Optional[str] = None
    balance: float = 0.0
    label: str = PAYABLE_LABEL


def _signed(t: LedgerTransaction) -> float:
    return t.amount if t.type == "credit" else -t.amount


def balance_for(transactions: Iterable[LedgerTransaction]) -> float:
    """Signed balance: credits add, debits subtract. Empty input gives 0."""
    return round2(sum(_signed(t) for t in transactions))


def total_credit(transactions: Iterable[LedgerTransaction]) -> float:
    return round2(sum(t.amount for t in transactions if t.type == "credit"))


def total_debit(transactions: Iterable[LedgerTransaction]) -> float:
    return round2(sum(t.amount for t in transactions if t.type == "debit"))


def balance_label(balance: float) -> str:
    """Label for a balance; zero counts as settled on the payable side."""
    return PAYABLE_LABEL if balance >= 0 else RECEIVABLE_LABEL


def summarize(transactions: Iterable[LedgerTransaction]) -> LedgerSummary:
    rows = list(transactions)
    balance = balance_for(rows)
    return LedgerSummary(
        total_credit=total_credit(rows),
        total_debit=total_debit(rows),
        balance=balance,
        label=balance_label(balance),
        count=len(rows),
    )


def customer_name(customers: Iterable[Customer], customer_id: str, default: str = UNKNOWN_CUSTOMER) -> str:
    """Resolve a customer id to its name, or default when no record matches."""
    for c in customers:
        if c.id == customer_id:
            return c.name
    logger.debug(f"No customer record for id {customer_id!r}")
    return default


def ensure_customer(customers: Iterable[Customer], customer_id: str) -> Customer:
    """Return the selected customer; raises ValidationError if none matches."""
    ensure_present(customer_id, "Select a customer first")
    for c in customers:
        if c.id == customer_id:
            return c
    raise ValidationError(f"Unknown customer: {customer_id}")


def customer_transactions(transactions: Iterable[LedgerTransaction], customer_id: str) -> list[LedgerTransaction]:
    return [t for t in transactions if t.customer_id == customer_id]


def search_transactions(
    transactions: Iterable[LedgerTransaction],
    query: str,
    customers: Optional[Iterable[Customer]] = None,
) -> list[LedgerTransaction]:
    """
    Case-insensitive substring search over note, type and date.

    Pass ``customers`` for the all-customers view: the resolved customer name
    is then searched too.
    """
    rows = list(transactions)
    q = (query or "").strip().lower()
    if not q:
        return rows

    names: dict[str, str] = {}
    if customers is not None:
        names = {c.id: c.name for c in customers}

    def matches(t: LedgerTransaction) -> bool:
        fields = [t.note or "", t.type, t.date]
        if customers is not None:
            fields.append(names.get(t.customer_id, UNKNOWN_CUSTOMER))
        return any(q in f.lower() for f in fields)

    return [t for t in rows if matches(t)]


def new_transaction(
    customer_id: str,
    type: str,
    amount,
    on: Optional[str | date] = None,
    note: str = "",
) -> LedgerTransaction:
    """
    Build a validated ledger entry ready to post.

    Raises:
        ValidationError: no customer, unknown type, or amount <= 0
    """
    ensure_present(customer_id, "Select a customer first")
    ensure_choice(type, TRANSACTION_TYPES, "type")
    value = ensure_positive(amount, "amount")
    return LedgerTransaction(
        customer_id=customer_id,
        type=type,
        amount=value,
        date=on or date.today(),
        note=note or "",
    )


def opening_balance_entry(
    customer_id: str,
    amount,
    type: str = "credit",
    on: Optional[str | date] = None,
) -> Optional[LedgerTransaction]:
    """
    Synthetic transaction for a new customer's opening amount.

    Returns None when there is nothing to record (amount missing or <= 0).
    """
    try:
        value = float(amount or 0)
    except (TypeError, ValueError):
        return None
    if value <= 0:
        return None
    return new_transaction(customer_id, type or "credit", value, on=on, note=OPENING_BALANCE_NOTE)


def remove_transaction(transactions: Iterable[LedgerTransaction], transaction_id: str) -> list[LedgerTransaction]:
    return [t for t in transactions if t.id != transaction_id]


def customer_balances(
    customers: Iterable[Customer],
    transactions: Iterable[LedgerTransaction],
) -> list[CustomerBalance]:
    """One balance card per customer, in customer order."""
    by_customer: dict[str, list[LedgerTransaction]] = {}
    for t in transactions:
        by_customer.setdefault(t.customer_id, []).append(t)

    cards = []
    for c in customers:
        bal = balance_for(by_customer.get(c.id, []))
        cards.append(CustomerBalance(
            customer_id=c.id,
            name=c.name,
            phone=c.phone,
            balance=bal,
            label=balance_label(bal),
        ))
    return cards


# ---------------- Reminders ----------------

def customer_reminders(reminders: Iterable[Reminder], customer_id: str) -> list[Reminder]:
    return [r for r in reminders if r.customer_id == customer_id]


def new_reminder(customer_id: str, due_date: Optional[str | date], message: str = "") -> Reminder:
    """Raises ValidationError when customer or due date is missing."""
    ensure_present(customer_id, "Select a customer first")
    ensure_present(due_date, "Due date is required")
    return Reminder(customer_id=customer_id, due_date=due_date, message=message or None)


def toggle_reminder(reminder: Reminder) -> Reminder:
    return reminder.model_copy(update={"is_completed": not reminder.is_completed})


def due_status(due_date: str, today: Optional[date] = None) -> str:
    """
    Badge text for a reminder due date: "Overdue 3d", "Due today" or "In 2d".

    Only the date part of an ISO datetime is considered. A blank or malformed
    stored date gives "No due date".
    """
    today = today or date.today()
    try:
        due = date.fromisoformat((due_date or "")[:10])
    except ValueError:
        logger.debug(f"Unreadable reminder due date {due_date!r}")
        return NO_DUE_DATE
    diff = (due - today).days
    if diff < 0:
        return f"Overdue {abs(diff)}d"
    if diff == 0:
        return "Due today"
    return f"In {diff}d"
