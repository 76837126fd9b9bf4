"""Invoice writer for exporting invoices to local files.

Each invoice is written as:
- ``{invoice_number}.json``: the full invoice snapshot, ready to hand to the
  persistence layer
- ``{invoice_number}.csv``: the line items as a table, amounts rounded to
  cents for bookkeeping imports
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Iterable, Tuple, Union

import pandas as pd

from invoice_engine.models.invoice import Invoice, InvoiceLineItem
from invoice_engine.utils.logging_utils import LogContext, log_function_call

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

LINE_ITEM_COLUMNS = [
    "description",
    "type",
    "quantity",
    "rate",
    "amount",
    "original_entry_id",
    "diagnostics",
]


def round_money(value: Decimal) -> Decimal:
    """Round a money value to cents, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def line_items_frame(items: Iterable[InvoiceLineItem]) -> pd.DataFrame:
    """Build a DataFrame of line items in invoice order.

    Args:
        items: Invoice line items

    Returns:
        DataFrame with one row per line item and LINE_ITEM_COLUMNS columns
    """
    rows = [
        {
            "description": item.description,
            "type": item.type.value,
            "quantity": item.quantity,
            "rate": round_money(item.rate),
            "amount": round_money(item.amount),
            "original_entry_id": item.original_entry_id or "",
            "diagnostics": ";".join(item.diagnostics),
        }
        for item in items
    ]
    return pd.DataFrame(rows, columns=LINE_ITEM_COLUMNS)


class InvoiceWriter:
    """Writes invoices to an output directory.

    Attributes:
        output_dir: Directory receiving the exported files

    Example:
        >>> writer = InvoiceWriter("invoices")
        >>> json_path, csv_path = writer.write(invoice)
        >>> json_path.name
        'T-ACM-2405-01.json'
    """

    def __init__(self, output_dir: Union[str, Path]):
        """Initialize the writer.

        Args:
            output_dir: Directory receiving the exported files
        """
        self.output_dir = Path(output_dir)

    @log_function_call
    def write(self, invoice: Invoice) -> Tuple[Path, Path]:
        """Write an invoice as JSON and its line items as CSV.

        Existing files for the same invoice number are overwritten.

        Args:
            invoice: Invoice to export

        Returns:
            Paths of the JSON and CSV files
        """
        with LogContext(invoice_number=invoice.invoice_number):
            self.output_dir.mkdir(parents=True, exist_ok=True)

            json_path = self.output_dir / f"{invoice.invoice_number}.json"
            json_path.write_text(
                invoice.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
            )

            csv_path = self.output_dir / f"{invoice.invoice_number}.csv"
            line_items_frame(invoice.items).to_csv(csv_path, index=False)

            logger.info(
                f"Wrote invoice {invoice.invoice_number} "
                f"({len(invoice.items)} items) to {self.output_dir}"
            )
            return json_path, csv_path
