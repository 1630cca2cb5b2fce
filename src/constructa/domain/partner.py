"""Partner domain service."""

import logging
from decimal import Decimal
from typing import Optional

from constructa.database.base import Database
from constructa.domain.entities import Partner as PartnerEntity
from constructa.domain.errors import (
    NotFoundError,
    ValidationError,
    partner_not_found,
    project_not_found,
)
from constructa.utils.money import HUNDRED, ZERO, to_decimal

logger = logging.getLogger(__name__)


def validate_percentage(percentage: Optional[Decimal]) -> None:
    if percentage is not None and not ZERO <= percentage <= HUNDRED:
        raise ValidationError(f"Percentage must be between 0 and 100, got {percentage}")


def validate_fixed_value(fixed_value: Optional[Decimal]) -> None:
    if fixed_value is not None and fixed_value < 0:
        raise ValidationError("Fixed value cannot be negative")


class PartnerService:
    """Service for managing partners of a project."""

    def __init__(self, db: Database):
        """Initialize partner service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_partner(
        self,
        project_id: int,
        name: str,
        email: str = "",
        phone: Optional[str] = None,
        percentage: Optional[Decimal] = None,
        fixed_value: Optional[Decimal] = None,
    ) -> int:
        """Add a partner to a project.

        Args:
            project_id: Project ID
            name: Partner name
            email: Contact email
            phone: Optional phone number
            percentage: Share under the PERCENTAGE policy (0-100)
            fixed_value: Target under the FIXED policy

        Returns:
            Partner ID

        Raises:
            NotFoundError: If project doesn't exist
            ValidationError: If name is empty or a value is out of range
        """
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))
        if not name or not name.strip():
            raise ValidationError("Partner name cannot be empty")
        validate_percentage(percentage)
        validate_fixed_value(fixed_value)

        partner_id = self.db.create_partner(
            project_id=project_id,
            name=name.strip(),
            email=email,
            phone=phone,
            percentage=percentage,
            fixed_value=fixed_value,
        )
        logger.info("Added partner %s (%s) to project %s", partner_id, name, project_id)
        return partner_id

    def get_partner(self, partner_id: int) -> Optional[PartnerEntity]:
        """Get partner by ID, or None if not found."""
        return self.db.get_partner(partner_id)

    def require_partner(self, partner_id: int) -> PartnerEntity:
        """Get partner by ID.

        Raises:
            NotFoundError: If partner doesn't exist
        """
        partner = self.db.get_partner(partner_id)
        if partner is None:
            raise NotFoundError(partner_not_found(partner_id))
        return partner

    def list_partners(self, project_id: int) -> list[PartnerEntity]:
        return self.db.list_partners(project_id)

    def resolve_partner(self, project_id: int, partner: str | int) -> PartnerEntity:
        """Resolve a partner name or ID within a project.

        Raises:
            NotFoundError: If no partner matches
        """
        try:
            partner_id = int(partner)
        except (ValueError, TypeError):
            partner_id = None

        if partner_id is not None:
            found = self.db.get_partner(partner_id)
            if found is not None and found.project_id == project_id:
                return found
            raise NotFoundError(partner_not_found(partner_id))

        for candidate in self.db.list_partners(project_id):
            if candidate.name == partner:
                return candidate
        raise NotFoundError(f"Partner '{partner}' not found")

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
        """Update partner fields.

        A share value can only be unset through clear_percentage or
        clear_fixed_value; None leaves it unchanged.

        Raises:
            NotFoundError: If partner doesn't exist
            ValidationError: If a value is out of range
        """
        self.require_partner(partner_id)
        if name is not None and not name.strip():
            raise ValidationError("Partner name cannot be empty")
        validate_percentage(percentage)
        validate_fixed_value(fixed_value)

        self.db.update_partner(
            partner_id,
            name=name.strip() if name is not None else None,
            email=email,
            phone=phone,
            percentage=percentage,
            fixed_value=fixed_value,
            clear_percentage=clear_percentage,
            clear_fixed_value=clear_fixed_value,
        )
        logger.info("Updated partner %s", partner_id)

    def delete_partner(self, partner_id: int) -> None:
        """Delete a partner.

        Historical transactions referencing the partner are kept; they still
        count toward project-wide totals.

        Raises:
            NotFoundError: If partner doesn't exist
        """
        self.require_partner(partner_id)
        self.db.delete_partner(partner_id)
        logger.info("Deleted partner %s", partner_id)

    def percentage_total(self, project_id: int) -> Decimal:
        """Sum of partner percentages in a project.

        Nothing requires this to be 100; callers may warn when it is not.
        """
        return sum(
            (to_decimal(p.percentage) for p in self.db.list_partners(project_id)),
            ZERO,
        )
