"""Shared pytest fixtures for constructa tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from constructa.database.factories import create_sqlite_database
from constructa.domain.finance import FinanceService
from constructa.domain.partner import PartnerService
from constructa.domain.project import ProjectService
from constructa.domain.supplier import SupplierService
from constructa.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def project_service(temp_db):
    return ProjectService(temp_db)


@pytest.fixture
def partner_service(temp_db):
    return PartnerService(temp_db)


@pytest.fixture
def supplier_service(temp_db):
    return SupplierService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    return TransactionService(temp_db)


@pytest.fixture
def finance_service(temp_db):
    return FinanceService(temp_db)


@pytest.fixture
def sample_project(project_service):
    """Create a project using the PERCENTAGE policy."""
    project_id = project_service.create_project(
        name="Casa Jardim", address="Rua das Flores, 10", start_date=date(2024, 1, 1)
    )
    return project_service.get_project(project_id)


@pytest.fixture
def sample_partners(partner_service, sample_project):
    """Two partners splitting the project 60/40."""
    ana_id = partner_service.add_partner(
        sample_project.id, "Ana", email="ana@example.com", percentage=Decimal("60")
    )
    bruno_id = partner_service.add_partner(
        sample_project.id, "Bruno", email="bruno@example.com", percentage=Decimal("40")
    )
    return {
        "Ana": partner_service.get_partner(ana_id),
        "Bruno": partner_service.get_partner(bruno_id),
    }


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
