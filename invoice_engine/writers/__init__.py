"""Writers for exporting generated invoices."""

from invoice_engine.writers.invoice_writer import InvoiceWriter, line_items_frame

__all__ = ["InvoiceWriter", "line_items_frame"]
