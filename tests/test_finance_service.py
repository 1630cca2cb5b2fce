"""Tests for FinanceService: summaries, forecasts and credit handling."""

from datetime import date
from decimal import Decimal

import pytest

from constructa.domain.entities import PayerType, PaymentMethod, TransactionType
from constructa.domain.errors import NotFoundError, ValidationError
from constructa.domain.finance import (
    CONTRIBUTION_NOTES,
    REFUND_DESCRIPTION,
    REFUND_NOTES,
)


@pytest.fixture
def funded_project(transaction_service, sample_project, sample_partners):
    """Ana put in 6000, Bruno 1000 and the box spent 5000."""
    ana = sample_partners["Ana"]
    bruno = sample_partners["Bruno"]
    for partner, amount in ((ana, "6000"), (bruno, "1000")):
        transaction_service.create_transaction(
            project_id=sample_project.id,
            type=TransactionType.CONTRIBUTION,
            date=date(2024, 2, 1),
            amount=Decimal(amount),
            beneficiary_id=partner.id,
        )
    transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.EXPENSE,
        date=date(2024, 2, 10),
        amount=Decimal("5000"),
    )
    return sample_project


def test_financial_summary(finance_service, funded_project, sample_partners):
    summary = finance_service.get_financial_summary(funded_project.id)

    assert summary.total_expenses == Decimal("5000")
    assert summary.box_balance == Decimal("2000")
    # Ana: 6000 - 60% of 5000; Bruno: 1000 - 40% of 5000
    assert summary.partner_balances[sample_partners["Ana"].id].balance == Decimal("3000")
    assert summary.partner_balances[sample_partners["Bruno"].id].balance == Decimal("-1000")


def test_summary_unknown_project(finance_service):
    with pytest.raises(NotFoundError):
        finance_service.get_financial_summary(404)


def test_list_credits(finance_service, funded_project, sample_partners):
    credits = finance_service.list_credits(funded_project.id)

    assert [c.partner_id for c in credits] == [sample_partners["Ana"].id]


def test_set_forecast_replaces_goal(finance_service, sample_project):
    first_id = finance_service.set_forecast(sample_project.id, "2024-03", Decimal("10000"))
    second_id = finance_service.set_forecast(sample_project.id, "2024-03", Decimal("12000"))

    assert first_id == second_id
    report = finance_service.get_monthly_forecast(sample_project.id, "2024-03")
    assert report.total_amount == Decimal("12000")


def test_set_forecast_validation(finance_service, sample_project):
    with pytest.raises(ValidationError, match="cannot be negative"):
        finance_service.set_forecast(sample_project.id, "2024-03", Decimal("-1"))
    with pytest.raises(ValueError, match="YYYY-MM"):
        finance_service.set_forecast(sample_project.id, "March", Decimal("1"))
    with pytest.raises(ValueError, match="out of range"):
        finance_service.set_forecast(sample_project.id, "2024-13", Decimal("1"))


def test_delete_forecast(finance_service, sample_project):
    finance_service.set_forecast(sample_project.id, "2024-03", Decimal("1000"))

    finance_service.delete_forecast(sample_project.id, "2024-03")

    assert not finance_service.get_monthly_forecast(sample_project.id, "2024-03").is_configured
    with pytest.raises(NotFoundError, match="No budget forecast set for 2024-03"):
        finance_service.delete_forecast(sample_project.id, "2024-03")


def test_monthly_forecast_from_store(finance_service, funded_project, sample_partners):
    """Forecast rows reflect month entries and whole-history credits."""
    ana = sample_partners["Ana"]
    bruno = sample_partners["Bruno"]
    finance_service.set_forecast(funded_project.id, "2024-03", Decimal("5000"))
    finance_service.record_contribution(
        funded_project.id, bruno.id, Decimal("500"), date(2024, 3, 5)
    )

    report = finance_service.get_monthly_forecast(
        funded_project.id, "2024-03", allow_credit_abatement=True
    )

    ana_row = report.partner(ana.id)
    assert ana_row.expected_amount == Decimal("3000")
    assert ana_row.available_credit == Decimal("3000")
    assert ana_row.used_credit == Decimal("3000")
    assert ana_row.pending == Decimal("0")

    bruno_row = report.partner(bruno.id)
    assert bruno_row.expected_amount == Decimal("2000")
    assert bruno_row.realized_amount == Decimal("500")
    assert bruno_row.used_credit == Decimal("0")
    assert bruno_row.pending == Decimal("1500")


def test_pending_contribution_rounds_to_cents(finance_service, sample_project, sample_partners):
    """Paying the pending amount in cents settles a goal that splits into fractions."""
    bruno = sample_partners["Bruno"]
    finance_service.set_forecast(sample_project.id, "2024-03", Decimal("1000.01"))

    row = finance_service.get_monthly_forecast(sample_project.id, "2024-03").partner(bruno.id)
    assert row.expected_amount == Decimal("400.004")

    amount = finance_service.pending_contribution(sample_project.id, bruno.id, "2024-03")
    assert amount == Decimal("400.00")

    finance_service.record_contribution(
        sample_project.id, bruno.id, amount, date(2024, 3, 5), month="2024-03"
    )

    row = finance_service.get_monthly_forecast(sample_project.id, "2024-03").partner(bruno.id)
    assert row.pending == Decimal("0.004")
    assert row.is_settled
    with pytest.raises(ValidationError, match="nothing pending"):
        finance_service.pending_contribution(sample_project.id, bruno.id, "2024-03")


def test_unrounded_contribution_settles(finance_service, sample_project, sample_partners):
    """The store keeps cents, so a fractional pending amount still settles."""
    bruno = sample_partners["Bruno"]
    finance_service.set_forecast(sample_project.id, "2024-03", Decimal("1000.01"))

    finance_service.record_contribution(
        sample_project.id, bruno.id, Decimal("400.004"), date(2024, 3, 5)
    )

    row = finance_service.get_monthly_forecast(sample_project.id, "2024-03").partner(bruno.id)
    assert row.pending < Decimal("0.01")
    assert row.is_settled


def test_pending_contribution_without_goal(finance_service, sample_project, sample_partners):
    with pytest.raises(NotFoundError, match="No budget forecast set for 2024-03"):
        finance_service.pending_contribution(
            sample_project.id, sample_partners["Ana"].id, "2024-03"
        )


def test_record_contribution(finance_service, transaction_service, sample_project, sample_partners):
    """Planned contributions reference their budget month."""
    ana = sample_partners["Ana"]

    txn_id = finance_service.record_contribution(
        sample_project.id, ana.id, Decimal("2500"), date(2024, 4, 2), month="2024-03"
    )

    txn = transaction_service.get_transaction(txn_id)
    assert txn.type == TransactionType.CONTRIBUTION
    assert txn.payer_type == PayerType.PARTNER
    assert txn.beneficiary_id == ana.id
    assert txn.payment_method == PaymentMethod.TRANSFER
    assert txn.description == "Contribution - Ref. 2024-03"
    assert txn.notes == CONTRIBUTION_NOTES


def test_record_contribution_defaults_month_to_date(
    finance_service, transaction_service, sample_project, sample_partners
):
    txn_id = finance_service.record_contribution(
        sample_project.id, sample_partners["Ana"].id, Decimal("100"), date(2024, 6, 30)
    )

    assert transaction_service.get_transaction(txn_id).description == "Contribution - Ref. 2024-06"


def test_record_refund_defaults_to_available_credit(
    finance_service, transaction_service, funded_project, sample_partners
):
    """Refunding without amount pays out the partner's whole credit."""
    ana = sample_partners["Ana"]

    txn_id = finance_service.record_refund(funded_project.id, ana.id, date=date(2024, 3, 1))

    txn = transaction_service.get_transaction(txn_id)
    assert txn.type == TransactionType.REFUND
    assert txn.payer_type == PayerType.BOX
    assert txn.amount == Decimal("3000")
    assert txn.description == REFUND_DESCRIPTION
    assert txn.notes == REFUND_NOTES

    summary = finance_service.get_financial_summary(funded_project.id)
    assert summary.partner_balances[ana.id].balance == Decimal("0")
    assert summary.box_balance == Decimal("-1000")
    assert finance_service.list_credits(funded_project.id) == []


def test_record_refund_without_credit(finance_service, funded_project, sample_partners):
    with pytest.raises(ValidationError, match="no credit"):
        finance_service.record_refund(funded_project.id, sample_partners["Bruno"].id)


def test_record_refund_default_rounds_to_cents(
    finance_service, transaction_service, sample_project, sample_partners
):
    ana = sample_partners["Ana"]
    transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.CONTRIBUTION,
        date=date(2024, 2, 1),
        amount=Decimal("1000.01"),
        beneficiary_id=ana.id,
    )
    transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.EXPENSE,
        date=date(2024, 2, 2),
        amount=Decimal("1000.01"),
    )

    txn_id = finance_service.record_refund(sample_project.id, ana.id, date=date(2024, 3, 1))

    assert transaction_service.get_transaction(txn_id).amount == Decimal("400.00")
    assert finance_service.list_credits(sample_project.id) == []


def test_record_refund_explicit_amount_and_today(
    finance_service, transaction_service, funded_project, sample_partners
):
    txn_id = finance_service.record_refund(
        funded_project.id, sample_partners["Ana"].id, amount=Decimal("500")
    )

    txn = transaction_service.get_transaction(txn_id)
    assert txn.amount == Decimal("500")
    assert txn.date == date.today()


def test_reports_from_store(finance_service, funded_project, sample_partners):
    trend = finance_service.get_monthly_trend(funded_project.id)
    assert [(row.month, row.contributions, row.expenses) for row in trend] == [
        ("2024-02", Decimal("7000"), Decimal("5000"))
    ]

    assert finance_service.get_expense_breakdown(funded_project.id) == [
        ("OTHER", Decimal("5000"))
    ]
    assert finance_service.get_expense_breakdown(
        funded_project.id, start_date=date(2024, 3, 1)
    ) == []

    statement = finance_service.get_partner_statement(
        funded_project.id, sample_partners["Bruno"].id
    )
    assert statement.total_contributed == Decimal("1000")

    with pytest.raises(NotFoundError):
        finance_service.get_partner_statement(funded_project.id, 999)
