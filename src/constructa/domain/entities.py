"""Domain model entities for constructa.

These are pure data classes representing business concepts, independent of
database schema. Derived values (balances, forecasts, reports) are value
objects recomputed from a LedgerSnapshot on every read and never persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from constructa.utils.money import CENT


class TransactionType(str, Enum):
    """Kind of ledger entry."""

    CONTRIBUTION = "CONTRIBUTION"
    EXPENSE = "EXPENSE"
    REFUND = "REFUND"


class PayerType(str, Enum):
    """Who funded an expense: the shared box or a partner's own pocket."""

    BOX = "BOX"
    PARTNER = "PARTNER"


class DistributionType(str, Enum):
    """Policy governing each partner's fair share."""

    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


class ProjectStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"


class ExpenseCategory(str, Enum):
    MATERIAL = "MATERIAL"
    LABOR = "LABOR"
    EQUIPMENT = "EQUIPMENT"
    ADMIN = "ADMIN"
    OTHER = "OTHER"


class ConstructionStage(str, Enum):
    PLANNING = "PLANNING"
    FOUNDATION = "FOUNDATION"
    STRUCTURE = "STRUCTURE"
    MASONRY = "MASONRY"
    ELECTRICAL = "ELECTRICAL"
    PLUMBING = "PLUMBING"
    FINISHING = "FINISHING"
    PAINTING = "PAINTING"
    EXTERNAL = "EXTERNAL"
    OTHER = "OTHER"


class PaymentMethod(str, Enum):
    PIX = "PIX"
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    CASH = "CASH"
    TRANSFER = "TRANSFER"
    BOLETO = "BOLETO"


@dataclass(frozen=True)
class Project:
    """Construction project domain entity."""

    id: int
    name: str
    address: str
    start_date: date
    status: ProjectStatus
    distribution_type: DistributionType
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Partner:
    """Co-investor domain entity.

    Only the field matching the project's distribution policy is consulted:
    ``percentage`` under PERCENTAGE, ``fixed_value`` under FIXED.
    """

    id: int
    project_id: int
    name: str
    email: str = ""
    phone: Optional[str] = None
    percentage: Optional[Decimal] = None
    fixed_value: Optional[Decimal] = None


@dataclass(frozen=True)
class Supplier:
    """Supplier domain entity."""

    id: int
    project_id: int
    name: str
    document: Optional[str] = None
    contact: Optional[str] = None
    default_category: Optional[ExpenseCategory] = None


@dataclass(frozen=True)
class Transaction:
    """Ledger entry domain entity.

    ``payer_id`` is meaningful for EXPENSE paid by a PARTNER,
    ``beneficiary_id`` for CONTRIBUTION and REFUND.
    """

    id: int
    project_id: int
    type: TransactionType
    date: date
    amount: Decimal
    description: str = ""
    payer_type: PayerType = PayerType.BOX
    payer_id: Optional[int] = None
    beneficiary_id: Optional[int] = None
    category: Optional[ExpenseCategory] = None
    stage: Optional[ConstructionStage] = None
    supplier: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def month(self) -> str:
        """Calendar month of the entry as YYYY-MM."""
        return self.date.strftime("%Y-%m")


@dataclass(frozen=True)
class BudgetForecast:
    """Budget goal for one calendar month of a project."""

    id: int
    project_id: int
    month: str  # YYYY-MM
    total_amount: Decimal
    notes: Optional[str] = None


@dataclass(frozen=True)
class LedgerSnapshot:
    """Consistent, immutable read of everything the engine needs."""

    project: Project
    partners: tuple[Partner, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    forecasts: tuple[BudgetForecast, ...] = ()
    suppliers: tuple[Supplier, ...] = ()

    def forecast_for(self, month: str) -> Optional[BudgetForecast]:
        """Return the budget forecast for a month, if one was set."""
        for forecast in self.forecasts:
            if forecast.month == month:
                return forecast
        return None

    def partner(self, partner_id: int) -> Optional[Partner]:
        for partner in self.partners:
            if partner.id == partner_id:
                return partner
        return None


@dataclass(frozen=True)
class LedgerTotals:
    """Project-wide totals over the whole transaction history."""

    total_expenses: Decimal
    box_inflow: Decimal
    box_outflow: Decimal
    box_balance: Decimal


@dataclass(frozen=True)
class PartnerBalance:
    """Whole-history credit/debt position of one partner.

    A positive balance is a credit (the project owes the partner), a
    negative balance is a debt.
    """

    partner_id: int
    partner_name: str
    total_contributed: Decimal
    total_expenses_paid: Decimal
    total_refunds_received: Decimal
    fair_share: Decimal
    balance: Decimal

    @property
    def actual_paid(self) -> Decimal:
        return (
            self.total_contributed
            + self.total_expenses_paid
            - self.total_refunds_received
        )

    @property
    def available_credit(self) -> Decimal:
        return max(Decimal("0"), self.balance)

    @property
    def is_credit(self) -> bool:
        return self.balance >= 0


@dataclass(frozen=True)
class FinancialSummary:
    """Derived whole-history view of a project's finances."""

    total_expenses: Decimal
    box_balance: Decimal
    partner_balances: dict[int, PartnerBalance] = field(default_factory=dict)


@dataclass(frozen=True)
class PartnerForecast:
    """One partner's share of a monthly budget goal."""

    partner_id: int
    partner_name: str
    percentage: Decimal
    expected_amount: Decimal
    direct_expenses: Decimal
    cash_contributions: Decimal
    refunds_received: Decimal
    realized_amount: Decimal
    available_credit: Decimal
    pending_before_credit: Decimal
    used_credit: Decimal
    pending: Decimal
    progress: Decimal
    transactions: tuple[Transaction, ...] = ()

    @property
    def is_settled(self) -> bool:
        return self.pending <= CENT


@dataclass(frozen=True)
class BudgetFulfillment:
    """Accounting view of a month: expected vs realized vs pending.

    Ignores cash timing entirely.
    """

    total_expected: Decimal
    total_realized: Decimal
    total_pending: Decimal
    total_credits_used: Decimal


@dataclass(frozen=True)
class LiquidityProjection:
    """Cash view of a month: can the box cover the remaining goal?

    Optimistic by construction: pending partner payments are counted as
    certain future inflow.
    """

    current_box_balance: Decimal
    total_direct_expenses: Decimal
    total_projected_cash_inflow: Decimal
    cash_needed_for_budget: Decimal
    cash_available: Decimal
    projected_ending_balance: Decimal
    is_liquidity_shortfall: bool
    liquidity_gap: Decimal


@dataclass(frozen=True)
class MonthlyForecastReport:
    """Forecast for a month that has a budget goal set."""

    month: str
    total_amount: Decimal
    allow_credit_abatement: bool
    partners: tuple[PartnerForecast, ...]
    fulfillment: BudgetFulfillment
    liquidity: LiquidityProjection

    is_configured = True

    def partner(self, partner_id: int) -> Optional[PartnerForecast]:
        for row in self.partners:
            if row.partner_id == partner_id:
                return row
        return None


@dataclass(frozen=True)
class ForecastNotConfigured:
    """No budget goal exists for the month; forecasting has not started."""

    month: str

    is_configured = False


ForecastResult = Union[MonthlyForecastReport, ForecastNotConfigured]


@dataclass(frozen=True)
class MonthlyTotals:
    """Expenses and contributions booked in one calendar month."""

    month: str
    expenses: Decimal
    contributions: Decimal


@dataclass(frozen=True)
class PartnerStatement:
    """Chronological statement of one partner's ledger activity."""

    partner_id: int
    partner_name: str
    transactions: tuple[Transaction, ...]
    total_contributed: Decimal
    total_expenses_paid: Decimal
    total_refunds: Decimal

    @property
    def total_credits(self) -> Decimal:
        return self.total_contributed + self.total_expenses_paid

    @property
    def net(self) -> Decimal:
        return self.total_credits - self.total_refunds
