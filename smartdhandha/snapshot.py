"""
Snapshot loading.

A snapshot is one JSON document holding the backend collections as they were
fetched, keyed by collection name:

    {"customers": [...], "transactions": [...], "invoices": [...], ...}

Missing collections are treated as empty.
"""
from __future__ import annotations
import json
from pathlib import Path
from loguru import logger
from pydantic import Field, ValidationError as SchemaError

from .invoices import verify_invoice_totals
from .models import (
    CamelModel,
    CashflowEntry,
    Customer,
    Invoice,
    LedgerTransaction,
    Product,
    Reminder,
    Supplier,
    Visitor,
)

COLLECTIONS = (
    "customers",
    "transactions",
    "reminders",
    "products",
    "invoices",
    "cashflows",
    "suppliers",
    "visitors",
)


class SnapshotError(Exception):
    """Raised when a snapshot file cannot be read or does not fit the schema."""
    pass


class Snapshot(CamelModel):
    customers: list[Customer] = Field(default_factory=list)
    transactions: list[LedgerTransaction] = Field(default_factory=list)
    reminders: list[Reminder] = Field(default_factory=list)
    products: list[Product] = Field(default_factory=list)
    invoices: list[Invoice] = Field(default_factory=list)
    cashflows: list[CashflowEntry] = Field(default_factory=list)
    suppliers: list[Supplier] = Field(default_factory=list)
    visitors: list[Visitor] = Field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {name: len(getattr(self, name)) for name in COLLECTIONS}


def parse_snapshot(data: dict) -> Snapshot:
    """Validate an already-decoded snapshot document."""
    if not isinstance(data, dict):
        raise SnapshotError(f"Snapshot must be a JSON object, got {type(data).__name__}")
    try:
        return Snapshot.model_validate(data)
    except SchemaError as e:
        raise SnapshotError(f"Snapshot does not match the record schema: {e}") from e


def load_snapshot(path: str | Path, check_totals: bool = True) -> Snapshot:
    """
    Read and validate a snapshot file.

    Args:
        path: JSON file exported from the backend collections
        check_totals: log a warning for every invoice whose stored totals
            disagree with its items

    Raises:
        SnapshotError: file missing or not UTF-8, not JSON, or records out of schema
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot {path} is not valid JSON: {e}") from e

    snapshot = parse_snapshot(data)
    logger.debug(f"Loaded snapshot {path}: {snapshot.counts()}")

    if check_totals:
        bad = [i for i in snapshot.invoices if verify_invoice_totals(i)]
        if bad:
            logger.warning(f"{len(bad)} of {len(snapshot.invoices)} invoices have inconsistent totals")
    return snapshot
