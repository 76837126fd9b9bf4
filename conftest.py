"""
Global pytest configuration and fixtures.
"""
import datetime as dt
import json
import os
from decimal import Decimal
from typing import Any, Dict

import pytest

from invoice_engine.config import BillingEngineConfig, reload_config, reset_logging
from invoice_engine.models import (
    Client,
    ExpenseEntry,
    FixedFeeEntry,
    LedgerSnapshot,
    MediaSpendEntry,
    Project,
    TimeEntry,
)


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'COMPANY_NAME': 'Tribute Studio',
        'INVOICE_PREFIX': 'T',
        'DEFAULT_PAYMENT_TERMS': 'DUE_ON_RECEIPT',
        'DEFAULT_MARKUP_PERCENT': '20',
        'ENVIRONMENT': 'testing',
        'DEBUG': 'true',
        'LOG_LEVEL': 'DEBUG'
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch, tmp_path):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv('LEDGER_SNAPSHOT_FILE', str(tmp_path / 'ledger_snapshot.json'))
    monkeypatch.setenv('OUTPUT_DIR', str(tmp_path / 'invoices'))

    # Clear the global config to force reload with test values
    import invoice_engine.config.settings
    invoice_engine.config.settings._config = None

    yield test_env_vars

    # Clean up
    invoice_engine.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> BillingEngineConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def acme_client() -> Client:
    """Client used across the Acme scenarios."""
    return Client(id='c1', name='Acme Corp', email='billing@acme.test')


@pytest.fixture
def acme_project() -> Project:
    """Acme website project billed at $150/h."""
    return Project(
        id='p1',
        name='Website',
        client_id='c1',
        hourly_rate=Decimal('150'),
        start_date=dt.date(2024, 1, 1),
    )


@pytest.fixture
def acme_media_project() -> Project:
    """Acme media project without an hourly rate."""
    return Project(id='p2', name='Paid Social', client_id='c1')


@pytest.fixture
def time_entry() -> TimeEntry:
    """8 hours of design work in May 2024."""
    return TimeEntry(
        id='e1',
        project_id='p1',
        date=dt.date(2024, 5, 10),
        description='Design',
        hours=Decimal('8'),
    )


@pytest.fixture
def expense_entry() -> ExpenseEntry:
    """$100 expense with a 20% markup in May 2024."""
    return ExpenseEntry(
        id='e2',
        project_id='p1',
        date=dt.date(2024, 5, 12),
        description='Stock photos',
        cost=Decimal('100'),
        markup_percent=Decimal('20'),
    )


@pytest.fixture
def retainer_entry() -> FixedFeeEntry:
    """Monthly retainer fee."""
    return FixedFeeEntry(
        id='e3',
        project_id='p1',
        date=dt.date(2024, 5, 1),
        description='Monthly Retainer',
        amount=Decimal('500'),
    )


@pytest.fixture
def media_entry() -> MediaSpendEntry:
    """$10,000 of combined ad spend."""
    return MediaSpendEntry(
        id='e4',
        project_id='p2',
        date=dt.date(2024, 5, 31),
        description='May ads',
        google_spend=Decimal('6000'),
        meta_spend=Decimal('4000'),
        billing_month='2024-05',
    )


@pytest.fixture
def acme_snapshot(
    acme_client, acme_project, acme_media_project, time_entry, expense_entry
) -> LedgerSnapshot:
    """Snapshot with one time entry and one expense for Acme."""
    return LedgerSnapshot(
        clients=[acme_client],
        projects=[acme_project, acme_media_project],
        entries=[time_entry, expense_entry],
    )


@pytest.fixture
def snapshot_document() -> Dict[str, Any]:
    """Snapshot as exported by the persistence layer (camelCase keys)."""
    return {
        'clients': [{'id': 'c1', 'name': 'Acme Corp', 'status': 'ACTIVE'}],
        'projects': [
            {
                'id': 'p1',
                'name': 'Website',
                'clientId': 'c1',
                'hourlyRate': 150,
                'status': 'ACTIVE',
            }
        ],
        'logs': [
            {
                'id': 'e1',
                'projectId': 'p1',
                'type': 'TIME',
                'date': '2024-05-10',
                'description': 'Design',
                'hours': 8,
            },
            {
                'id': 'e2',
                'projectId': 'p1',
                'type': 'EXPENSE',
                'date': '2024-05-12',
                'description': 'Stock photos',
                'cost': 100,
                'markupPercent': 20,
            },
        ],
        'invoices': [],
    }


@pytest.fixture
def snapshot_file(tmp_path, snapshot_document):
    """Snapshot document written to a temporary file."""
    path = tmp_path / 'ledger_snapshot.json'
    path.write_text(json.dumps(snapshot_document), encoding='utf-8')
    return path


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Drop handlers installed by CLI invocations."""
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def cleanup_test_files():
    """Clean up any test files created during testing."""
    yield

    # Remove test coverage files in case they're created
    test_files = ['coverage.xml', '.coverage']
    for file in test_files:
        if os.path.exists(file):
            os.remove(file)


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on location."""
    for item in items:
        # Add unit marker for tests in tests/unit/
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
