"""Mapper functions to convert between domain models and SQLAlchemy models.

Enum-valued columns are stored as their string values and converted back
to domain enums here.
"""

from typing import Optional, TypeVar
from enum import Enum

from constructa.domain import entities as domain
from constructa.database.models import (
    Project as ORMProject,
    Partner as ORMPartner,
    Supplier as ORMSupplier,
    Transaction as ORMTransaction,
    BudgetForecast as ORMBudgetForecast,
)

E = TypeVar("E", bound=Enum)


def _enum_or_none(enum_type: type[E], value: Optional[str]) -> Optional[E]:
    if value is None:
        return None
    return enum_type(value)


def enum_value(value) -> Optional[str]:
    """Convert a domain enum (or its string value) to the stored string."""
    if value is None:
        return None
    return value.value if isinstance(value, Enum) else str(value)


def project_to_domain(orm_project: ORMProject) -> domain.Project:
    """Convert SQLAlchemy Project model to domain Project entity."""
    return domain.Project(
        id=orm_project.id,
        name=orm_project.name,
        address=orm_project.address or "",
        start_date=orm_project.start_date,
        status=domain.ProjectStatus(orm_project.status),
        distribution_type=domain.DistributionType(orm_project.distribution_type),
        created_at=orm_project.created_at,
    )


def partner_to_domain(orm_partner: ORMPartner) -> domain.Partner:
    """Convert SQLAlchemy Partner model to domain Partner entity."""
    return domain.Partner(
        id=orm_partner.id,
        project_id=orm_partner.project_id,
        name=orm_partner.name,
        email=orm_partner.email or "",
        phone=orm_partner.phone,
        percentage=orm_partner.percentage,
        fixed_value=orm_partner.fixed_value,
    )


def supplier_to_domain(orm_supplier: ORMSupplier) -> domain.Supplier:
    """Convert SQLAlchemy Supplier model to domain Supplier entity."""
    return domain.Supplier(
        id=orm_supplier.id,
        project_id=orm_supplier.project_id,
        name=orm_supplier.name,
        document=orm_supplier.document,
        contact=orm_supplier.contact,
        default_category=_enum_or_none(
            domain.ExpenseCategory, orm_supplier.default_category
        ),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        project_id=orm_transaction.project_id,
        type=domain.TransactionType(orm_transaction.type),
        date=orm_transaction.date,
        amount=orm_transaction.amount,
        description=orm_transaction.description or "",
        payer_type=domain.PayerType(orm_transaction.payer_type),
        payer_id=orm_transaction.payer_id,
        beneficiary_id=orm_transaction.beneficiary_id,
        category=_enum_or_none(domain.ExpenseCategory, orm_transaction.category),
        stage=_enum_or_none(domain.ConstructionStage, orm_transaction.stage),
        supplier=orm_transaction.supplier,
        payment_method=_enum_or_none(
            domain.PaymentMethod, orm_transaction.payment_method
        ),
        notes=orm_transaction.notes,
        created_at=orm_transaction.created_at,
    )


def forecast_to_domain(orm_forecast: ORMBudgetForecast) -> domain.BudgetForecast:
    """Convert SQLAlchemy BudgetForecast model to domain BudgetForecast entity."""
    return domain.BudgetForecast(
        id=orm_forecast.id,
        project_id=orm_forecast.project_id,
        month=orm_forecast.month,
        total_amount=orm_forecast.total_amount,
        notes=orm_forecast.notes,
    )
