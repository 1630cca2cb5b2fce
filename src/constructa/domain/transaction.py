"""Transaction (ledger entry) domain service."""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional

from constructa.database.base import Database
from constructa.domain.entities import (
    ConstructionStage,
    ExpenseCategory,
    PayerType,
    PaymentMethod,
    Transaction as TransactionEntity,
    TransactionType,
)
from constructa.domain.errors import (
    NotFoundError,
    ValidationError,
    negative_amount,
    partner_not_found,
    project_not_found,
    transaction_not_found,
)

logger = logging.getLogger(__name__)

# Who funds each entry type when the caller does not say
DEFAULT_PAYER = {
    TransactionType.CONTRIBUTION: PayerType.PARTNER,
    TransactionType.EXPENSE: PayerType.BOX,
    TransactionType.REFUND: PayerType.BOX,
}

UPDATABLE_FIELDS = (
    "type",
    "date",
    "amount",
    "description",
    "payer_type",
    "payer_id",
    "beneficiary_id",
    "category",
    "stage",
    "supplier",
    "payment_method",
    "notes",
)


class TransactionService:
    """Service for recording and editing ledger entries."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_partner(self, project_id: int, partner_id: int) -> None:
        partner = self.db.get_partner(partner_id)
        if partner is None or partner.project_id != project_id:
            raise NotFoundError(partner_not_found(partner_id))

    def validate(self, txn: TransactionEntity, known_partners: frozenset = frozenset()) -> None:
        """Check the entry against the ledger rules.

        Amounts are never negative. A partner-paid expense names its payer;
        contributions and refunds name their beneficiary. Referenced partners
        must exist in the project, except those in ``known_partners``: IDs the
        stored entry already carried, which may belong to deleted partners.

        Raises:
            ValidationError: If a rule is broken
            NotFoundError: If a referenced partner doesn't exist
        """
        if txn.amount is None:
            raise ValidationError("Amount is required")
        if txn.amount < 0:
            raise ValidationError(negative_amount())

        if txn.type == TransactionType.EXPENSE:
            if txn.payer_type == PayerType.PARTNER:
                if txn.payer_id is None:
                    raise ValidationError("Expense paid by a partner requires a payer")
                if txn.payer_id not in known_partners:
                    self._require_partner(txn.project_id, txn.payer_id)
        else:
            if txn.beneficiary_id is None:
                raise ValidationError(
                    f"{TransactionType(txn.type).value.capitalize()} requires a partner (beneficiary)"
                )
            if txn.beneficiary_id not in known_partners:
                self._require_partner(txn.project_id, txn.beneficiary_id)

    def create_transaction(
        self,
        project_id: int,
        type: TransactionType,
        date: date,
        amount: Decimal,
        description: str = "",
        payer_type: Optional[PayerType] = None,
        payer_id: Optional[int] = None,
        beneficiary_id: Optional[int] = None,
        category: Optional[ExpenseCategory] = None,
        stage: Optional[ConstructionStage] = None,
        supplier: Optional[str] = None,
        payment_method: Optional[PaymentMethod] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Record a ledger entry.

        Args:
            project_id: Project ID
            type: CONTRIBUTION, EXPENSE or REFUND
            date: Entry date
            amount: Non-negative amount
            description: Free text description
            payer_type: Who funded the entry (defaults per type)
            payer_id: Partner who paid an expense from their own pocket
            beneficiary_id: Partner who contributed or was refunded
            category: Optional expense category
            stage: Optional construction stage
            supplier: Optional supplier name
            payment_method: Optional payment method
            notes: Optional notes

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If project or partner doesn't exist
            ValidationError: If the entry breaks a ledger rule
        """
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))

        type = TransactionType(type)
        payer_type = PayerType(payer_type) if payer_type else DEFAULT_PAYER[type]
        if type == TransactionType.EXPENSE and payer_type == PayerType.BOX:
            payer_id = None

        candidate = TransactionEntity(
            id=0,
            project_id=project_id,
            type=type,
            date=date,
            amount=amount,
            description=description,
            payer_type=payer_type,
            payer_id=payer_id,
            beneficiary_id=beneficiary_id,
            category=category,
            stage=stage,
            supplier=supplier,
            payment_method=payment_method,
            notes=notes,
        )
        self.validate(candidate)

        transaction_id = self.db.create_transaction(
            project_id=project_id,
            type=type,
            date=date,
            amount=amount,
            description=description,
            payer_type=payer_type,
            payer_id=payer_id,
            beneficiary_id=beneficiary_id,
            category=category,
            stage=stage,
            supplier=supplier,
            payment_method=payment_method,
            notes=notes,
        )
        logger.info(
            "Recorded %s %s of %s on %s", type.value, transaction_id, amount, date
        )
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID, or None if not found."""
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def update_transaction(self, transaction_id: int, **changes) -> None:
        """Edit a ledger entry.

        The edited entry is validated as a whole, so changing the type of an
        entry may require also setting its payer or beneficiary. Partners the
        entry already referenced are not looked up again, so entries of a
        deleted partner stay editable.

        Args:
            transaction_id: Transaction ID
            **changes: Fields to change (see UPDATABLE_FIELDS)

        Raises:
            NotFoundError: If transaction or partner doesn't exist
            ValidationError: If a field is unknown or the result breaks a rule
        """
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(
                f"Cannot update transaction fields: {', '.join(sorted(unknown))}"
            )

        txn = self.require_transaction(transaction_id)
        updated = replace(txn, **changes)
        if (
            updated.type == TransactionType.EXPENSE
            and updated.payer_type == PayerType.BOX
            and updated.payer_id is not None
        ):
            updated = replace(updated, payer_id=None)
            changes["payer_id"] = None
        stored = frozenset(
            partner_id
            for partner_id in (txn.payer_id, txn.beneficiary_id)
            if partner_id is not None
        )
        self.validate(updated, known_partners=stored)

        if changes:
            self.db.update_transaction(transaction_id, **changes)
            logger.info("Updated transaction %s", transaction_id)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a ledger entry.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        self.require_transaction(transaction_id)
        self.db.delete_transaction(transaction_id)
        logger.info("Deleted transaction %s", transaction_id)

    def clear_transactions(self, project_id: int) -> int:
        """Delete every transaction and budget forecast of a project.

        Returns:
            Number of transactions deleted
        """
        count = self.db.delete_project_transactions(project_id)
        logger.info("Cleared %s transactions of project %s", count, project_id)
        return count

    def list_transactions(
        self,
        project_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        types: Optional[list[TransactionType]] = None,
        search: Optional[str] = None,
    ) -> list[TransactionEntity]:
        """List ledger entries, newest first.

        Args:
            project_id: Project ID
            start_date: Optional start date filter
            end_date: Optional end date filter
            types: Optional entry types to keep
            search: Optional case-insensitive text matched against the
                description, supplier and amount

        Returns:
            List of transaction entities
        """
        transactions = self.db.list_transactions(
            project_id, start_date=start_date, end_date=end_date, types=types
        )
        if not search:
            return transactions

        term = search.lower()
        return [
            txn
            for txn in transactions
            if term in (txn.description or "").lower()
            or term in (txn.supplier or "").lower()
            or term in str(txn.amount)
        ]
