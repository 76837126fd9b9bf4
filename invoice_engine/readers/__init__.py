"""Readers for ledger snapshots and extracted statement data."""

from invoice_engine.readers.snapshot_reader import SnapshotReader
from invoice_engine.readers.statement_reader import (
    StatementCandidate,
    StatementReader,
)

__all__ = ["SnapshotReader", "StatementCandidate", "StatementReader"]
