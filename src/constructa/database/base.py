"""Abstract ledger store interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from constructa.domain.entities import (
    BudgetForecast,
    ConstructionStage,
    DistributionType,
    ExpenseCategory,
    Partner,
    PayerType,
    PaymentMethod,
    Project,
    ProjectStatus,
    Supplier,
    Transaction,
    TransactionType,
)


class Database(ABC):
    """Abstract ledger store for constructa.

    Every mutation is committed before the call returns, so a snapshot read
    after it is consistent.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Project operations
    @abstractmethod
    def create_project(
        self,
        name: str,
        address: str = "",
        start_date: Optional[date] = None,
        status: ProjectStatus = ProjectStatus.ACTIVE,
        distribution_type: DistributionType = DistributionType.PERCENTAGE,
    ) -> int:
        """Create a project. Returns project ID."""
        pass

    @abstractmethod
    def get_project(self, project_id: int) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def list_projects(self) -> list[Project]:
        """List all projects, oldest first."""
        pass

    @abstractmethod
    def update_project(
        self,
        project_id: int,
        name: Optional[str] = None,
        address: Optional[str] = None,
        start_date: Optional[date] = None,
        status: Optional[ProjectStatus] = None,
        distribution_type: Optional[DistributionType] = None,
    ) -> None:
        """Update project settings; None leaves a field unchanged."""
        pass

    # Partner operations
    @abstractmethod
    def create_partner(
        self,
        project_id: int,
        name: str,
        email: str = "",
        phone: Optional[str] = None,
        percentage: Optional[Decimal] = None,
        fixed_value: Optional[Decimal] = None,
    ) -> int:
        """Create a partner. Returns partner ID."""
        pass

    @abstractmethod
    def get_partner(self, partner_id: int) -> Optional[Partner]:
        """Get partner by ID."""
        pass

    @abstractmethod
    def list_partners(self, project_id: int) -> list[Partner]:
        """List partners of a project."""
        pass

    @abstractmethod
    def update_partner(
        self,
        partner_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        percentage: Optional[Decimal] = None,
        fixed_value: Optional[Decimal] = None,
        clear_percentage: bool = False,
        clear_fixed_value: bool = False,
    ) -> None:
        """Update partner fields; None leaves a field unchanged.

        Args:
            clear_percentage: If True, unset the percentage
            clear_fixed_value: If True, unset the fixed value
        """
        pass

    @abstractmethod
    def delete_partner(self, partner_id: int) -> None:
        """Delete a partner. Their transactions are kept."""
        pass

    # Supplier operations
    @abstractmethod
    def create_supplier(
        self,
        project_id: int,
        name: str,
        document: Optional[str] = None,
        contact: Optional[str] = None,
        default_category: Optional[ExpenseCategory] = None,
    ) -> int:
        """Create a supplier. Returns supplier ID."""
        pass

    @abstractmethod
    def get_supplier(self, supplier_id: int) -> Optional[Supplier]:
        """Get supplier by ID."""
        pass

    @abstractmethod
    def list_suppliers(self, project_id: int) -> list[Supplier]:
        """List suppliers of a project."""
        pass

    @abstractmethod
    def update_supplier(
        self,
        supplier_id: int,
        name: Optional[str] = None,
        document: Optional[str] = None,
        contact: Optional[str] = None,
        default_category: Optional[ExpenseCategory] = None,
    ) -> None:
        """Update supplier fields; None leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_supplier(self, supplier_id: int) -> None:
        """Delete a supplier."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        project_id: int,
        type: TransactionType,
        date: date,
        amount: Decimal,
        description: str = "",
        payer_type: PayerType = PayerType.BOX,
        payer_id: Optional[int] = None,
        beneficiary_id: Optional[int] = None,
        category: Optional[ExpenseCategory] = None,
        stage: Optional[ConstructionStage] = None,
        supplier: Optional[str] = None,
        payment_method: Optional[PaymentMethod] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        project_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        types: Optional[list[TransactionType]] = None,
    ) -> list[Transaction]:
        """List transactions of a project, newest first.

        Args:
            project_id: Project ID
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            types: Optional list of transaction types to keep
        """
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, **fields) -> None:
        """Update transaction fields.

        Only the keyword arguments given are written; passing None for an
        optional field clears it.
        """
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def delete_project_transactions(self, project_id: int) -> int:
        """Delete all transactions and forecasts of a project.

        Returns the number of transactions deleted.
        """
        pass

    # Budget forecast operations
    @abstractmethod
    def get_forecast(self, project_id: int, month: str) -> Optional[BudgetForecast]:
        """Get the budget forecast of a month, if any."""
        pass

    @abstractmethod
    def list_forecasts(self, project_id: int) -> list[BudgetForecast]:
        """List budget forecasts of a project ordered by month."""
        pass

    @abstractmethod
    def upsert_forecast(
        self,
        project_id: int,
        month: str,
        total_amount: Decimal,
        notes: Optional[str] = None,
    ) -> int:
        """Create the month's forecast or update its total. Returns forecast ID."""
        pass

    @abstractmethod
    def delete_forecast(self, project_id: int, month: str) -> None:
        """Delete the budget forecast of a month."""
        pass
