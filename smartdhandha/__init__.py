"""
SmartDhandha core - ledger, invoice, GST and P&L computations.

Pure functions over snapshot lists of backend records (customers, ledger
transactions, products, invoices, cashflow entries, visitors). Nothing here
does network or database I/O; the caller fetches the records and decides when
to recompute.

Key Features:
- Khata style ledger balances ("Aap Denge" / "Aapko Milenge")
- Invoice line GST with per-line rounding and reproducible totals
- GST summary with payable / input-tax-credit position
- Profit & loss with COGS taken from purchase invoices
- Text and JSON reports from a JSON snapshot

Usage:
    python -m smartdhandha gst --data snapshot.json --from 2024-04-01 --to 2024-06-30
"""

__version__ = "1.0.0"

from .config import AppConfig
from .gst import GSTSummary, gst_summary
from .invoices import InvoiceTotals, LineAmounts, compute_invoice_totals, compute_line
from .ledger import balance_for, total_credit, total_debit
from .money import format_currency, round2
from .pnl import ProfitAndLoss, profit_and_loss
from .snapshot import Snapshot, SnapshotError, load_snapshot
from .validators import ValidationError

__all__ = [
    "AppConfig",
    "GSTSummary",
    "InvoiceTotals",
    "LineAmounts",
    "ProfitAndLoss",
    "Snapshot",
    "SnapshotError",
    "ValidationError",
    "balance_for",
    "compute_invoice_totals",
    "compute_line",
    "format_currency",
    "gst_summary",
    "load_snapshot",
    "profit_and_loss",
    "round2",
    "total_credit",
    "total_debit",
    "__version__",
]
