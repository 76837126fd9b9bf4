"""Snapshot reader for loading ledger exports.

The document store itself is not accessed here. The persistence layer
exports a JSON document holding clients, projects, ledger entries and
invoices, and this reader validates it into a LedgerSnapshot.

Expected document structure:
```
{
  "clients":  [{"id": "c1", "name": "Acme Corp", ...}],
  "projects": [{"id": "p1", "name": "Brand Refresh", "clientId": "c1",
                "hourlyRate": 150, "status": "ACTIVE"}],
  "entries":  [{"id": "l1", "projectId": "p1", "date": "2024-05-02",
                "type": "TIME", "hours": 8, "description": "Design"}],
  "invoices": [{"invoiceNumber": "T-ACM-2405-01", ...}]
}
```
``logs`` is accepted in place of ``entries``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from invoice_engine.models.snapshot import LedgerSnapshot
from invoice_engine.utils.logging_utils import log_function_call

logger = logging.getLogger(__name__)


class SnapshotReader:
    """Reads ledger snapshots from JSON files.

    Attributes:
        path: Location of the snapshot file

    Example:
        >>> reader = SnapshotReader("ledger_snapshot.json")
        >>> snapshot = reader.read()
        >>> len(snapshot.entries)
        42
    """

    def __init__(self, path: Union[str, Path]):
        """Initialize the reader.

        Args:
            path: Location of the snapshot file
        """
        self.path = Path(path)

    @log_function_call
    def read(self) -> LedgerSnapshot:
        """Load and validate the snapshot.

        Returns:
            Validated LedgerSnapshot

        Raises:
            FileNotFoundError: If the snapshot file does not exist
            json.JSONDecodeError: If the file is not valid JSON
            pydantic.ValidationError: If a record is malformed
        """
        logger.info(f"Reading ledger snapshot from {self.path}")
        with self.path.open(encoding="utf-8") as f:
            data = json.load(f)
        return self.parse(data)

    @staticmethod
    def parse(data: Dict[str, Any]) -> LedgerSnapshot:
        """Validate an already-decoded snapshot document.

        Args:
            data: Decoded JSON document

        Returns:
            Validated LedgerSnapshot

        Raises:
            pydantic.ValidationError: If a record is malformed
        """
        try:
            snapshot = LedgerSnapshot.model_validate(data)
        except ValidationError as e:
            logger.error(f"Snapshot failed validation with {e.error_count()} errors")
            raise

        logger.info(
            f"Loaded {len(snapshot.clients)} clients, {len(snapshot.projects)} "
            f"projects, {len(snapshot.entries)} entries, "
            f"{len(snapshot.invoices)} invoices"
        )
        return snapshot

    def write(self, snapshot: LedgerSnapshot) -> Path:
        """Write a snapshot back to the same file.

        Used after importing new entries so the next run sees them.

        Args:
            snapshot: Snapshot to write

        Returns:
            Path of the written file
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            snapshot.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
        )
        logger.info(f"Wrote ledger snapshot to {self.path}")
        return self.path
