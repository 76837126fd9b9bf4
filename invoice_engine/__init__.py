"""Billing aggregation and invoice-generation engine.

Turns a ledger of billable events (time, expenses, fixed fees and media-spend
fees) into priced, ordered and numbered invoices.
"""

__version__ = "1.0.0"
