"""Finance domain service: snapshots, balances, forecasts and reports.

Every read loads a fresh LedgerSnapshot from the store and recomputes all
derived values from the full history. Mutations go to the store and are
picked up by the next read.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from constructa.database.base import Database
from constructa.domain.balances import calculate_financials, credit_partners
from constructa.domain.entities import (
    FinancialSummary,
    ForecastResult,
    LedgerSnapshot,
    MonthlyTotals,
    PartnerBalance,
    PartnerStatement,
    PayerType,
    PaymentMethod,
    TransactionType,
)
from constructa.domain.errors import (
    NotFoundError,
    ValidationError,
    forecast_not_found,
    negative_amount,
    partner_not_found,
    project_not_found,
)
from constructa.domain.forecast import build_monthly_forecast
from constructa.domain.reports import (
    expense_breakdown,
    filter_by_period,
    monthly_trend,
    partner_statement,
)
from constructa.domain.transaction import TransactionService
from constructa.utils.date_parser import month_key, parse_month
from constructa.utils.money import quantize_cents

logger = logging.getLogger(__name__)

CONTRIBUTION_NOTES = "Generated by financial planning"
REFUND_DESCRIPTION = "Credit refund"
REFUND_NOTES = "Generated by credit management"


class FinanceService:
    """Service computing financial views of a project."""

    def __init__(self, db: Database):
        """Initialize finance service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transactions = TransactionService(db)

    def load_snapshot(self, project_id: int) -> LedgerSnapshot:
        """Read a consistent snapshot of a project's ledger.

        Raises:
            NotFoundError: If project doesn't exist
        """
        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(project_not_found(project_id))

        return LedgerSnapshot(
            project=project,
            partners=tuple(self.db.list_partners(project_id)),
            transactions=tuple(self.db.list_transactions(project_id)),
            forecasts=tuple(self.db.list_forecasts(project_id)),
            suppliers=tuple(self.db.list_suppliers(project_id)),
        )

    def get_financial_summary(self, project_id: int) -> FinancialSummary:
        """Box balance, total expenses and every partner's balance."""
        snapshot = self.load_snapshot(project_id)
        logger.debug(
            "Recomputing financials of project %s over %d transactions",
            project_id,
            len(snapshot.transactions),
        )
        return calculate_financials(
            snapshot.project, snapshot.partners, snapshot.transactions
        )

    def get_monthly_forecast(
        self, project_id: int, month: str, allow_credit_abatement: bool = False
    ) -> ForecastResult:
        """Forecast report for a month.

        Returns ForecastNotConfigured when the month has no budget goal.
        """
        month = parse_month(month)
        snapshot = self.load_snapshot(project_id)
        logger.debug(
            "Projecting %s of project %s (abatement=%s)",
            month,
            project_id,
            allow_credit_abatement,
        )
        return build_monthly_forecast(
            snapshot, month, allow_credit_abatement=allow_credit_abatement
        )

    def set_forecast(
        self,
        project_id: int,
        month: str,
        total_amount: Decimal,
        notes: Optional[str] = None,
    ) -> int:
        """Set the budget goal of a month, replacing any existing goal.

        Returns:
            Forecast ID

        Raises:
            NotFoundError: If project doesn't exist
            ValidationError: If the goal is negative
            ValueError: If the month is malformed
        """
        month = parse_month(month)
        if total_amount < 0:
            raise ValidationError(negative_amount("Budget goal"))
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))

        forecast_id = self.db.upsert_forecast(project_id, month, total_amount, notes)
        logger.info("Set budget goal of %s to %s", month, total_amount)
        return forecast_id

    def delete_forecast(self, project_id: int, month: str) -> None:
        """Remove the budget goal of a month.

        Raises:
            NotFoundError: If the month has no budget goal
        """
        month = parse_month(month)
        if self.db.get_forecast(project_id, month) is None:
            raise NotFoundError(forecast_not_found(month))
        self.db.delete_forecast(project_id, month)
        logger.info("Deleted budget goal of %s", month)

    def pending_contribution(
        self,
        project_id: int,
        partner_id: int,
        month: str,
        allow_credit_abatement: bool = False,
    ) -> Decimal:
        """What a partner still owes towards a month's goal, in cents.

        Raises:
            NotFoundError: If the month has no budget goal
            ValidationError: If the partner has nothing pending
        """
        month = parse_month(month)
        report = self.get_monthly_forecast(
            project_id, month, allow_credit_abatement=allow_credit_abatement
        )
        if not report.is_configured:
            raise NotFoundError(forecast_not_found(month))

        row = report.partner(partner_id)
        if row is None or row.is_settled:
            raise ValidationError(f"Partner {partner_id} has nothing pending for {month}")
        return quantize_cents(row.pending)

    def record_contribution(
        self,
        project_id: int,
        partner_id: int,
        amount: Decimal,
        date: date,
        month: Optional[str] = None,
    ) -> int:
        """Record a partner's cash contribution to the box.

        Args:
            project_id: Project ID
            partner_id: Contributing partner
            amount: Amount contributed
            date: Contribution date
            month: Forecast month the contribution refers to (defaults to
                the month of ``date``)

        Returns:
            Transaction ID
        """
        reference = parse_month(month) if month else month_key(date)
        return self.transactions.create_transaction(
            project_id=project_id,
            type=TransactionType.CONTRIBUTION,
            date=date,
            amount=amount,
            description=f"Contribution - Ref. {reference}",
            payer_type=PayerType.PARTNER,
            beneficiary_id=partner_id,
            payment_method=PaymentMethod.TRANSFER,
            notes=CONTRIBUTION_NOTES,
        )

    def record_refund(
        self,
        project_id: int,
        partner_id: int,
        amount: Optional[Decimal] = None,
        date: Optional[date] = None,
    ) -> int:
        """Refund a partner from the box.

        Args:
            project_id: Project ID
            partner_id: Partner being refunded
            amount: Amount refunded (defaults to the partner's available credit)
            date: Refund date (defaults to today)

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If partner doesn't exist
            ValidationError: If there is nothing to refund
        """
        if amount is None:
            summary = self.get_financial_summary(project_id)
            balance = summary.partner_balances.get(partner_id)
            if balance is None:
                raise NotFoundError(partner_not_found(partner_id))
            amount = quantize_cents(balance.available_credit)
            if amount <= 0:
                raise ValidationError(
                    f"Partner {partner_id} has no credit available to refund"
                )

        return self.transactions.create_transaction(
            project_id=project_id,
            type=TransactionType.REFUND,
            date=date or date_today(),
            amount=amount,
            description=REFUND_DESCRIPTION,
            payer_type=PayerType.BOX,
            beneficiary_id=partner_id,
            payment_method=PaymentMethod.TRANSFER,
            notes=REFUND_NOTES,
        )

    def list_credits(self, project_id: int) -> list[PartnerBalance]:
        """Partners the project currently owes money to, largest first."""
        return credit_partners(self.get_financial_summary(project_id))

    def get_monthly_trend(
        self,
        project_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[MonthlyTotals]:
        snapshot = self.load_snapshot(project_id)
        return monthly_trend(
            filter_by_period(snapshot.transactions, start_date, end_date)
        )

    def get_expense_breakdown(
        self,
        project_id: int,
        key: str = "category",
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[tuple[str, Decimal]]:
        snapshot = self.load_snapshot(project_id)
        return expense_breakdown(
            filter_by_period(snapshot.transactions, start_date, end_date), key
        )

    def get_partner_statement(
        self,
        project_id: int,
        partner_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> PartnerStatement:
        """Statement of one partner's entries within a period.

        Raises:
            NotFoundError: If partner isn't on the project roster
        """
        snapshot = self.load_snapshot(project_id)
        partner = snapshot.partner(partner_id)
        if partner is None:
            raise NotFoundError(partner_not_found(partner_id))
        return partner_statement(
            partner, filter_by_period(snapshot.transactions, start_date, end_date)
        )


def date_today() -> date:
    return date.today()
