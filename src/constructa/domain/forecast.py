"""Monthly budget forecast and cash-liquidity projection.

Two views are derived for a month with a budget goal:

* the accounting view (BudgetFulfillment): what each partner was expected
  to pay, what they already paid and what is still pending;
* the liquidity view (LiquidityProjection): whether the box, plus the cash
  still expected from partners, covers the part of the goal that partners
  did not pay directly.

The liquidity view treats pending payments as certain inflow, so it is an
optimistic estimate rather than a promise.
"""

from decimal import Decimal
from typing import Optional, Sequence

from constructa.domain.balances import calculate_financials, is_partner_entry
from constructa.domain.entities import (
    BudgetFulfillment,
    FinancialSummary,
    ForecastNotConfigured,
    ForecastResult,
    LedgerSnapshot,
    LiquidityProjection,
    MonthlyForecastReport,
    Partner,
    PartnerForecast,
    Transaction,
    TransactionType,
)
from constructa.utils.money import (
    HUNDRED,
    ZERO,
    floor_zero,
    percent_of,
    to_decimal,
    total_amount,
)


def month_entries(
    transactions: Sequence[Transaction], partner_id: int, month: str
) -> list[Transaction]:
    """Partner entries booked in ``month`` (YYYY-MM), newest first."""
    entries = [
        txn
        for txn in transactions
        if txn.month == month and is_partner_entry(txn, partner_id)
    ]
    return sorted(entries, key=lambda txn: txn.date, reverse=True)


def project_partner(
    partner: Partner,
    goal: Decimal,
    month: str,
    transactions: Sequence[Transaction],
    global_balance: Decimal,
    allow_credit_abatement: bool,
) -> PartnerForecast:
    """Project one partner's share of a monthly goal.

    Args:
        partner: Partner on the roster
        goal: The month's budget goal
        month: Month key (YYYY-MM)
        transactions: Whole transaction history
        global_balance: Partner's whole-history balance
        allow_credit_abatement: Whether an existing credit may offset the
            amount still pending this month

    Returns:
        PartnerForecast for the partner
    """
    percentage = to_decimal(partner.percentage)
    expected = percent_of(goal, percentage)

    entries = month_entries(transactions, partner.id, month)
    direct_expenses = total_amount(
        txn for txn in entries if txn.type == TransactionType.EXPENSE
    )
    cash_contributions = total_amount(
        txn for txn in entries if txn.type == TransactionType.CONTRIBUTION
    )
    refunds_received = total_amount(
        txn for txn in entries if txn.type == TransactionType.REFUND
    )
    realized = (direct_expenses + cash_contributions) - refunds_received

    available_credit = floor_zero(global_balance)
    pending_before_credit = expected - realized

    used_credit = ZERO
    pending = pending_before_credit
    if allow_credit_abatement and pending_before_credit > 0:
        used_credit = min(pending_before_credit, available_credit)
        pending = pending_before_credit - used_credit
    pending = floor_zero(pending)

    if expected > 0:
        progress = (realized + used_credit) / expected * HUNDRED
    else:
        progress = ZERO

    return PartnerForecast(
        partner_id=partner.id,
        partner_name=partner.name,
        percentage=percentage,
        expected_amount=expected,
        direct_expenses=direct_expenses,
        cash_contributions=cash_contributions,
        refunds_received=refunds_received,
        realized_amount=realized,
        available_credit=available_credit,
        pending_before_credit=pending_before_credit,
        used_credit=used_credit,
        pending=pending,
        progress=progress,
        transactions=tuple(entries),
    )


def summarize_fulfillment(
    goal: Decimal, rows: Sequence[PartnerForecast]
) -> BudgetFulfillment:
    """Accounting view: expected vs realized, ignoring cash timing."""
    total_realized = sum((row.realized_amount for row in rows), ZERO)
    return BudgetFulfillment(
        total_expected=goal,
        total_realized=total_realized,
        total_pending=floor_zero(goal - total_realized),
        total_credits_used=sum((row.used_credit for row in rows), ZERO),
    )


def project_liquidity(
    goal: Decimal, box_balance: Decimal, rows: Sequence[PartnerForecast]
) -> LiquidityProjection:
    """Liquidity view: projected box cash at the end of the month.

    Expenses partners paid directly never pass through the box, so only the
    rest of the goal has to be covered by box cash.
    """
    total_direct = sum((row.direct_expenses for row in rows), ZERO)
    inflow = sum((row.pending for row in rows), ZERO)

    cash_needed = floor_zero(goal - total_direct)
    cash_available = box_balance + inflow
    ending = cash_available - cash_needed

    return LiquidityProjection(
        current_box_balance=box_balance,
        total_direct_expenses=total_direct,
        total_projected_cash_inflow=inflow,
        cash_needed_for_budget=cash_needed,
        cash_available=cash_available,
        projected_ending_balance=ending,
        is_liquidity_shortfall=ending < 0,
        liquidity_gap=abs(ending),
    )


def build_monthly_forecast(
    snapshot: LedgerSnapshot,
    month: str,
    allow_credit_abatement: bool = False,
    summary: Optional[FinancialSummary] = None,
) -> ForecastResult:
    """Build the forecast report for a month.

    Args:
        snapshot: Consistent read of the project ledger
        month: Month key (YYYY-MM)
        allow_credit_abatement: Whether credits may offset pending payments
        summary: Whole-history summary of the same snapshot; computed when
            not supplied

    Returns:
        MonthlyForecastReport, or ForecastNotConfigured when no budget goal
        exists for the month
    """
    forecast = snapshot.forecast_for(month)
    if forecast is None:
        return ForecastNotConfigured(month=month)

    if summary is None:
        summary = calculate_financials(
            snapshot.project, snapshot.partners, snapshot.transactions
        )

    goal = to_decimal(forecast.total_amount)
    rows = []
    for partner in snapshot.partners:
        balance = summary.partner_balances.get(partner.id)
        global_balance = balance.balance if balance is not None else ZERO
        rows.append(
            project_partner(
                partner,
                goal,
                month,
                snapshot.transactions,
                global_balance,
                allow_credit_abatement,
            )
        )

    return MonthlyForecastReport(
        month=month,
        total_amount=goal,
        allow_credit_abatement=allow_credit_abatement,
        partners=tuple(rows),
        fulfillment=summarize_fulfillment(goal, rows),
        liquidity=project_liquidity(goal, summary.box_balance, rows),
    )
