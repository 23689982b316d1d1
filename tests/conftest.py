"""Shared pytest fixtures for payables tests."""

import tempfile
import os
from datetime import datetime
from decimal import Decimal
import pytest

from payables.database.factories import create_sqlite_database
from payables.domain.account import AccountService
from payables.domain.entities import CostCenterShare
from payables.domain.occurrence import OccurrenceService
from payables.domain.payment import PaymentService
from payables.domain.supplier import SupplierService

TENANT = "acme"
OTHER_TENANT = "globex"


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
def tenant():
    """Tenant key used by most tests."""
    return TENANT


@pytest.fixture
def supplier_service(temp_db):
    """Create a SupplierService with a temporary database."""
    return SupplierService(temp_db)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def payment_service(temp_db):
    """Create a PaymentService with a temporary database."""
    return PaymentService(temp_db)


@pytest.fixture
def occurrence_service(temp_db):
    """Create an OccurrenceService with a temporary database."""
    return OccurrenceService(temp_db)


@pytest.fixture
def sample_supplier(supplier_service):
    """Create a sample supplier for testing."""
    supplier_id = supplier_service.create_supplier(TENANT, name="Energia SA", invoice_by_email=True)
    return supplier_service.get_supplier(TENANT, supplier_id)


@pytest.fixture
def sample_account(account_service, sample_supplier):
    """Create an account starting January 2024, issued on the 5th and due on the 10th."""
    account_id = account_service.create_account(
        TENANT,
        supplier_id=sample_supplier.id,
        description="Electricity",
        amount=Decimal("1000.00"),
        issue_day=5,
        due_day=10,
        cost_centers=[
            CostCenterShare(code="ADM", percent=Decimal("60")),
            CostCenterShare(code="OPS", percent=Decimal("40")),
        ],
        created_at=datetime(2024, 1, 3, 9, 30),
    )
    return account_service.get_account(TENANT, account_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_args(temp_db):
    """Common leading CLI arguments pointing at the temporary database."""
    return ["--db-path", temp_db.database_path, "--tenant", TENANT]
