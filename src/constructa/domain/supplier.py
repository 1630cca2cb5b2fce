"""Supplier domain service."""

import logging
from typing import Optional

from constructa.database.base import Database
from constructa.domain.entities import ExpenseCategory, Supplier as SupplierEntity
from constructa.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_supplier,
    supplier_not_found,
)

logger = logging.getLogger(__name__)


class SupplierService:
    """Service for managing suppliers of a project."""

    def __init__(self, db: Database):
        self.db = db

    def add_supplier(
        self,
        project_id: int,
        name: str,
        document: Optional[str] = None,
        contact: Optional[str] = None,
        default_category: Optional[ExpenseCategory] = None,
    ) -> int:
        """Add a supplier.

        Raises:
            ValidationError: If name is empty
            ConflictError: If a supplier with the same name exists
        """
        if not name or not name.strip():
            raise ValidationError("Supplier name cannot be empty")
        name = name.strip()
        for supplier in self.db.list_suppliers(project_id):
            if supplier.name == name:
                raise ConflictError(duplicate_supplier(name))

        supplier_id = self.db.create_supplier(
            project_id=project_id,
            name=name,
            document=document,
            contact=contact,
            default_category=(
                ExpenseCategory(default_category) if default_category else None
            ),
        )
        logger.info("Added supplier %s (%s)", supplier_id, name)
        return supplier_id

    def list_suppliers(self, project_id: int) -> list[SupplierEntity]:
        return self.db.list_suppliers(project_id)

    def update_supplier(
        self,
        supplier_id: int,
        name: Optional[str] = None,
        document: Optional[str] = None,
        contact: Optional[str] = None,
        default_category: Optional[ExpenseCategory] = None,
    ) -> None:
        """Update supplier fields.

        Raises:
            NotFoundError: If supplier doesn't exist
            ConflictError: If the new name is taken
        """
        supplier = self.db.get_supplier(supplier_id)
        if supplier is None:
            raise NotFoundError(supplier_not_found(supplier_id))

        if name is not None:
            name = name.strip()
            for other in self.db.list_suppliers(supplier.project_id):
                if other.id != supplier_id and other.name == name:
                    raise ConflictError(duplicate_supplier(name))

        self.db.update_supplier(
            supplier_id,
            name=name,
            document=document,
            contact=contact,
            default_category=default_category,
        )

    def delete_supplier(self, supplier_id: int) -> None:
        """Delete a supplier.

        Transactions keep the supplier name they were recorded with.

        Raises:
            NotFoundError: If supplier doesn't exist
        """
        if self.db.get_supplier(supplier_id) is None:
            raise NotFoundError(supplier_not_found(supplier_id))
        self.db.delete_supplier(supplier_id)
        logger.info("Deleted supplier %s", supplier_id)
