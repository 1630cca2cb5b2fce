"""Period reports over the ledger."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from constructa.domain.balances import is_partner_entry
from constructa.domain.entities import (
    MonthlyTotals,
    Partner,
    PartnerStatement,
    Transaction,
    TransactionType,
)
from constructa.utils.money import ZERO, to_decimal, total_amount

OTHER = "OTHER"
BREAKDOWN_KEYS = ("category", "stage")


def filter_by_period(
    transactions: Sequence[Transaction],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[Transaction]:
    """Entries dated within [start_date, end_date]; either bound is optional."""
    return [
        txn
        for txn in transactions
        if (start_date is None or txn.date >= start_date)
        and (end_date is None or txn.date <= end_date)
    ]


def monthly_trend(transactions: Sequence[Transaction]) -> list[MonthlyTotals]:
    """Expenses and contributions per month, oldest month first."""
    groups: dict[str, dict[str, Decimal]] = defaultdict(
        lambda: {"expenses": ZERO, "contributions": ZERO}
    )

    for txn in transactions:
        bucket = groups[txn.month]
        if txn.type == TransactionType.EXPENSE:
            bucket["expenses"] += to_decimal(txn.amount)
        elif txn.type == TransactionType.CONTRIBUTION:
            bucket["contributions"] += to_decimal(txn.amount)

    return [
        MonthlyTotals(
            month=month,
            expenses=groups[month]["expenses"],
            contributions=groups[month]["contributions"],
        )
        for month in sorted(groups)
    ]


def expense_breakdown(
    transactions: Sequence[Transaction], key: str = "category"
) -> list[tuple[str, Decimal]]:
    """Total expenses grouped by category or construction stage.

    Expenses without a value for ``key`` are grouped under OTHER.

    Raises:
        ValueError: If ``key`` is not 'category' or 'stage'
    """
    if key not in BREAKDOWN_KEYS:
        raise ValueError(
            f"Unknown breakdown '{key}'. Supported: {', '.join(BREAKDOWN_KEYS)}"
        )

    groups: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for txn in transactions:
        if txn.type != TransactionType.EXPENSE:
            continue
        value = getattr(txn, key)
        label = getattr(value, "value", value) if value is not None else OTHER
        groups[label] += to_decimal(txn.amount)

    return sorted(groups.items(), key=lambda item: (-item[1], item[0]))


def partner_statement(
    partner: Partner, transactions: Sequence[Transaction]
) -> PartnerStatement:
    """Chronological statement of a partner's entries in ``transactions``."""
    entries = sorted(
        (txn for txn in transactions if is_partner_entry(txn, partner.id)),
        key=lambda txn: txn.date,
    )
    return PartnerStatement(
        partner_id=partner.id,
        partner_name=partner.name,
        transactions=tuple(entries),
        total_contributed=total_amount(
            t for t in entries if t.type == TransactionType.CONTRIBUTION
        ),
        total_expenses_paid=total_amount(
            t for t in entries if t.type == TransactionType.EXPENSE
        ),
        total_refunds=total_amount(
            t for t in entries if t.type == TransactionType.REFUND
        ),
    )
