"""Ledger snapshot model.

A snapshot is the consistent, in-memory view of clients, projects, ledger
entries and invoice history that the persistence layer hands to the engine.
"""

from typing import Dict, List, Optional

from pydantic import Field

from invoice_engine.models.base import BaseDataModel
from invoice_engine.models.client import Client, Project
from invoice_engine.models.invoice import Invoice
from invoice_engine.models.ledger import LedgerEntry


class LedgerSnapshot(BaseDataModel):
    """Everything the engine needs to price and number an invoice.

    Attributes:
        clients: Client directory
        projects: Project directory
        entries: Ledger entries of every type
        invoices: Invoice history, needed for numbering
    """

    clients: List[Client] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    entries: List[LedgerEntry] = Field(default_factory=list, alias="logs")
    invoices: List[Invoice] = Field(default_factory=list)

    def project_index(self) -> Dict[str, Project]:
        """Map project id to project."""
        return {p.id: p for p in self.projects}

    def find_client(self, client_id: str) -> Optional[Client]:
        """Look up a client by id, falling back to an exact name match.

        Args:
            client_id: Client identifier or display name

        Returns:
            The matching client, or None
        """
        for client in self.clients:
            if client.id == client_id:
                return client
        for client in self.clients:
            if client.name == client_id:
                return client
        return None
