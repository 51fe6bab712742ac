"""Shared pytest fixtures for taxfiler tests."""

import tempfile
import os
from datetime import datetime, timedelta, UTC
from pathlib import Path
import pytest

from taxfiler.database.factories import create_sqlite_database
from taxfiler.domain.bank_transaction import BankTransactionService
from taxfiler.domain.csv_import import CSVImportService
from taxfiler.domain.expense import ExpenseService
from taxfiler.domain.import_audit import ImportAuditService
from taxfiler.domain.income import IncomeService

BUSINESS_ID = "1b4e28ba-2fa1-11d2-883f-0016d3cca427"
OTHER_BUSINESS_ID = "7c9e6679-7425-40de-944b-e07fc1f90ae7"


class FakeClock:
    """Controllable clock returning aware UTC datetimes."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def business_id():
    return BUSINESS_ID


@pytest.fixture
def clock():
    """Clock fixed at midday on 1 June 2025."""
    return FakeClock(datetime(2025, 6, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def import_service(temp_db, clock):
    """Create a CSVImportService with a temporary database."""
    return CSVImportService(temp_db, clock=clock)


@pytest.fixture
def audit_service(temp_db, clock):
    """Create an ImportAuditService with a temporary database."""
    return ImportAuditService(temp_db, clock=clock)


@pytest.fixture
def bank_transaction_service(temp_db, clock):
    """Create a BankTransactionService with a temporary database."""
    return BankTransactionService(temp_db, clock=clock)


@pytest.fixture
def income_service(temp_db):
    return IncomeService(temp_db)


@pytest.fixture
def expense_service(temp_db):
    return ExpenseService(temp_db)


@pytest.fixture
def write_csv(tmp_path):
    """Return a helper that writes CSV text to a file and returns its path."""

    def _write(text: str, name: str = "statement.csv", encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding=encoding)
        return path

    return _write


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
