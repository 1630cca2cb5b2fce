"""Partner balance calculation: who owes the project and who is owed."""

from decimal import Decimal
from typing import Sequence

from constructa.domain.entities import (
    DistributionType,
    FinancialSummary,
    Partner,
    PartnerBalance,
    PayerType,
    Project,
    Transaction,
    TransactionType,
)
from constructa.domain.ledger import aggregate
from constructa.utils.money import CENT, percent_of, to_decimal, total_amount


def is_partner_entry(txn: Transaction, partner_id: int) -> bool:
    """Whether an entry moves money for a partner.

    True for the partner's contributions and refunds, and for expenses the
    partner paid from their own pocket.
    """
    if txn.type == TransactionType.CONTRIBUTION:
        return txn.beneficiary_id == partner_id
    if txn.type == TransactionType.EXPENSE:
        return txn.payer_type == PayerType.PARTNER and txn.payer_id == partner_id
    if txn.type == TransactionType.REFUND:
        return txn.beneficiary_id == partner_id
    return False


def fair_share(project: Project, partner: Partner, total_expenses: Decimal) -> Decimal:
    """Amount a partner should have paid under the project's policy.

    PERCENTAGE scales with total expenses. FIXED is a flat lifetime target
    that does not depend on expenses or elapsed time. Missing values count
    as zero.
    """
    if project.distribution_type == DistributionType.PERCENTAGE:
        return percent_of(total_expenses, partner.percentage)
    return to_decimal(partner.fixed_value)


def partner_balance(
    project: Project,
    partner: Partner,
    transactions: Sequence[Transaction],
    total_expenses: Decimal,
) -> PartnerBalance:
    """Compute one partner's whole-history balance."""
    entries = [txn for txn in transactions if is_partner_entry(txn, partner.id)]

    contributions = total_amount(
        txn for txn in entries if txn.type == TransactionType.CONTRIBUTION
    )
    expenses_paid = total_amount(
        txn for txn in entries if txn.type == TransactionType.EXPENSE
    )
    refunds_received = total_amount(
        txn for txn in entries if txn.type == TransactionType.REFUND
    )

    share = fair_share(project, partner, total_expenses)
    actual_paid = contributions + expenses_paid - refunds_received

    return PartnerBalance(
        partner_id=partner.id,
        partner_name=partner.name,
        total_contributed=contributions,
        total_expenses_paid=expenses_paid,
        total_refunds_received=refunds_received,
        fair_share=share,
        balance=actual_paid - share,
    )


def compute_balances(
    project: Project,
    partners: Sequence[Partner],
    transactions: Sequence[Transaction],
    total_expenses: Decimal,
) -> dict[int, PartnerBalance]:
    """Compute balances for every partner on the roster.

    Entries pointing at partners no longer on the roster are ignored here.
    Percentages are used as given, even when they do not add up to 100.
    """
    transactions = list(transactions)
    return {
        partner.id: partner_balance(project, partner, transactions, total_expenses)
        for partner in partners
    }


def calculate_financials(
    project: Project,
    partners: Sequence[Partner],
    transactions: Sequence[Transaction],
) -> FinancialSummary:
    """Derive the full financial summary of a project from scratch."""
    transactions = list(transactions)
    totals = aggregate(transactions)
    balances = compute_balances(
        project, partners, transactions, totals.total_expenses
    )
    return FinancialSummary(
        total_expenses=totals.total_expenses,
        box_balance=totals.box_balance,
        partner_balances=balances,
    )


def credit_partners(
    summary: FinancialSummary, threshold: Decimal = CENT
) -> list[PartnerBalance]:
    """Partners holding a credit above ``threshold``, largest credit first."""
    credits = [
        balance
        for balance in summary.partner_balances.values()
        if balance.balance > threshold
    ]
    return sorted(credits, key=lambda b: (-b.balance, b.partner_name))
