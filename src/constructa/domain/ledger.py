"""Ledger aggregation: whole-history project totals."""

from typing import Iterable

from constructa.domain.entities import (
    LedgerTotals,
    PayerType,
    Transaction,
    TransactionType,
)
from constructa.utils.money import ZERO, to_decimal


def aggregate(transactions: Iterable[Transaction]) -> LedgerTotals:
    """Reduce the full transaction history into project-wide totals.

    Every expense counts toward ``total_expenses`` whoever paid it, but only
    box-paid expenses and refunds leave the box. Contributions are the only
    box inflow. Order is irrelevant and no entry is excluded by date.

    Args:
        transactions: Any finite sequence of ledger entries

    Returns:
        LedgerTotals with expenses, box inflow/outflow and box balance
    """
    total_expenses = ZERO
    box_inflow = ZERO
    box_outflow = ZERO

    for txn in transactions:
        amount = to_decimal(txn.amount)
        if txn.type == TransactionType.EXPENSE:
            total_expenses += amount
            if txn.payer_type == PayerType.BOX:
                box_outflow += amount
        elif txn.type == TransactionType.CONTRIBUTION:
            box_inflow += amount
        elif txn.type == TransactionType.REFUND:
            box_outflow += amount

    return LedgerTotals(
        total_expenses=total_expenses,
        box_inflow=box_inflow,
        box_outflow=box_outflow,
        box_balance=box_inflow - box_outflow,
    )
