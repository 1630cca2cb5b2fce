"""Tests for period reports."""

from datetime import date
from decimal import Decimal

import pytest

from constructa.domain.entities import ConstructionStage, ExpenseCategory, PayerType
from constructa.domain.reports import (
    expense_breakdown,
    filter_by_period,
    monthly_trend,
    partner_statement,
)

from builders import make_partner, make_txn


@pytest.fixture
def history():
    return [
        make_txn("CONTRIBUTION", 5000, on=date(2024, 1, 5), beneficiary_id=1),
        make_txn(
            "EXPENSE",
            1200,
            on=date(2024, 1, 15),
            category=ExpenseCategory.MATERIAL,
            stage=ConstructionStage.FOUNDATION,
        ),
        make_txn(
            "EXPENSE",
            800,
            on=date(2024, 2, 10),
            payer_type=PayerType.PARTNER,
            payer_id=2,
            category=ExpenseCategory.LABOR,
        ),
        make_txn("EXPENSE", 300, on=date(2024, 2, 20)),
        make_txn("REFUND", 250, on=date(2024, 3, 1), beneficiary_id=1),
    ]


def test_filter_by_period_inclusive(history):
    """Both bounds are inclusive and optional."""
    assert len(filter_by_period(history)) == 5
    assert len(filter_by_period(history, start_date=date(2024, 1, 15))) == 4
    assert len(filter_by_period(history, end_date=date(2024, 2, 10))) == 3
    assert len(filter_by_period(history, date(2024, 2, 10), date(2024, 2, 20))) == 2


def test_monthly_trend(history):
    """Expenses and contributions are totalled per month, oldest first."""
    rows = monthly_trend(history)

    assert [row.month for row in rows] == ["2024-01", "2024-02", "2024-03"]
    assert rows[0].contributions == Decimal("5000")
    assert rows[0].expenses == Decimal("1200")
    assert rows[1].contributions == Decimal("0")
    assert rows[1].expenses == Decimal("1100")
    # Refund-only month still shows up
    assert rows[2].expenses == Decimal("0")


def test_breakdown_by_category(history):
    """Expenses without category are grouped under OTHER, largest first."""
    groups = expense_breakdown(history, "category")

    assert groups == [
        ("MATERIAL", Decimal("1200")),
        ("LABOR", Decimal("800")),
        ("OTHER", Decimal("300")),
    ]


def test_breakdown_by_stage(history):
    groups = expense_breakdown(history, "stage")

    assert groups == [
        ("FOUNDATION", Decimal("1200")),
        ("OTHER", Decimal("1100")),
    ]


def test_breakdown_rejects_unknown_key(history):
    with pytest.raises(ValueError, match="Unknown breakdown"):
        expense_breakdown(history, "supplier")


def test_partner_statement(history):
    """Statement lists a partner's own entries in date order."""
    statement = partner_statement(make_partner(1, "Ana", 60), list(reversed(history)))

    assert statement.partner_name == "Ana"
    assert [txn.date for txn in statement.transactions] == [
        date(2024, 1, 5),
        date(2024, 3, 1),
    ]
    assert statement.total_contributed == Decimal("5000")
    assert statement.total_expenses_paid == Decimal("0")
    assert statement.total_refunds == Decimal("250")
    assert statement.net == Decimal("4750")


def test_partner_statement_includes_direct_expenses(history):
    statement = partner_statement(make_partner(2, "Bruno", 40), history)

    assert statement.total_expenses_paid == Decimal("800")
    assert statement.total_credits == Decimal("800")
