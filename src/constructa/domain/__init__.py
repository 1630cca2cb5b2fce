"""Domain layer for constructa.

The reconciliation engine (ledger aggregation, partner balances, monthly
forecast) is pure and exported here. Services that talk to the ledger store
live in their own modules and are imported from there.
"""

from constructa.domain.ledger import aggregate
from constructa.domain.balances import (
    calculate_financials,
    compute_balances,
    credit_partners,
)
from constructa.domain.forecast import build_monthly_forecast

__all__ = [
    "aggregate",
    "calculate_financials",
    "compute_balances",
    "credit_partners",
    "build_monthly_forecast",
]
