"""Tests for TransactionService."""

from datetime import date
from decimal import Decimal

import pytest

from constructa.domain.entities import (
    ExpenseCategory,
    PayerType,
    PaymentMethod,
    TransactionType,
)
from constructa.domain.errors import NotFoundError, ValidationError


def test_create_box_expense(transaction_service, sample_project):
    """Expenses default to being paid by the box."""
    txn_id = transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.EXPENSE,
        date=date(2024, 3, 1),
        amount=Decimal("1200.50"),
        description="Cement",
        category=ExpenseCategory.MATERIAL,
        supplier="Depósito Central",
        payment_method=PaymentMethod.PIX,
    )

    txn = transaction_service.get_transaction(txn_id)
    assert txn.type == TransactionType.EXPENSE
    assert txn.payer_type == PayerType.BOX
    assert txn.payer_id is None
    assert txn.amount == Decimal("1200.50")
    assert txn.category == ExpenseCategory.MATERIAL
    assert txn.supplier == "Depósito Central"
    assert txn.month == "2024-03"


def test_box_expense_drops_payer_id(transaction_service, sample_project, sample_partners):
    """A box-paid expense never keeps a partner payer."""
    txn_id = transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.EXPENSE,
        date=date(2024, 3, 1),
        amount=Decimal("10"),
        payer_type=PayerType.BOX,
        payer_id=sample_partners["Ana"].id,
    )

    assert transaction_service.get_transaction(txn_id).payer_id is None


def test_create_partner_expense(transaction_service, sample_project, sample_partners):
    bruno = sample_partners["Bruno"]
    txn_id = transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.EXPENSE,
        date=date(2024, 3, 2),
        amount=Decimal("300"),
        payer_type=PayerType.PARTNER,
        payer_id=bruno.id,
    )

    txn = transaction_service.get_transaction(txn_id)
    assert txn.payer_type == PayerType.PARTNER
    assert txn.payer_id == bruno.id


def test_partner_expense_requires_payer(transaction_service, sample_project):
    with pytest.raises(ValidationError, match="requires a payer"):
        transaction_service.create_transaction(
            project_id=sample_project.id,
            type=TransactionType.EXPENSE,
            date=date(2024, 3, 2),
            amount=Decimal("300"),
            payer_type=PayerType.PARTNER,
        )


def test_contribution_requires_beneficiary(transaction_service, sample_project):
    with pytest.raises(ValidationError, match="requires a partner"):
        transaction_service.create_transaction(
            project_id=sample_project.id,
            type=TransactionType.CONTRIBUTION,
            date=date(2024, 3, 2),
            amount=Decimal("300"),
        )


def test_refund_for_unknown_partner(transaction_service, sample_project):
    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(
            project_id=sample_project.id,
            type=TransactionType.REFUND,
            date=date(2024, 3, 2),
            amount=Decimal("300"),
            beneficiary_id=999,
        )


def test_negative_amount_rejected(transaction_service, sample_project, sample_partners):
    with pytest.raises(ValidationError, match="cannot be negative"):
        transaction_service.create_transaction(
            project_id=sample_project.id,
            type=TransactionType.CONTRIBUTION,
            date=date(2024, 3, 2),
            amount=Decimal("-1"),
            beneficiary_id=sample_partners["Ana"].id,
        )


def test_unknown_project(transaction_service):
    with pytest.raises(NotFoundError, match="Project 42 not found"):
        transaction_service.create_transaction(
            project_id=42,
            type=TransactionType.EXPENSE,
            date=date(2024, 3, 2),
            amount=Decimal("1"),
        )


def test_update_transaction(transaction_service, sample_project, sample_partners):
    """Editing an entry revalidates it as a whole."""
    txn_id = transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.EXPENSE,
        date=date(2024, 3, 1),
        amount=Decimal("100"),
    )

    transaction_service.update_transaction(
        txn_id,
        amount=Decimal("150"),
        payer_type=PayerType.PARTNER,
        payer_id=sample_partners["Ana"].id,
    )

    txn = transaction_service.get_transaction(txn_id)
    assert txn.amount == Decimal("150")
    assert txn.payer_type == PayerType.PARTNER
    assert txn.payer_id == sample_partners["Ana"].id


def test_update_back_to_box_clears_payer(transaction_service, sample_project, sample_partners):
    txn_id = transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.EXPENSE,
        date=date(2024, 3, 1),
        amount=Decimal("100"),
        payer_type=PayerType.PARTNER,
        payer_id=sample_partners["Ana"].id,
    )

    transaction_service.update_transaction(txn_id, payer_type=PayerType.BOX)

    assert transaction_service.get_transaction(txn_id).payer_id is None


def test_update_invalid_result_rejected(transaction_service, sample_project):
    """Turning an expense into a contribution needs a beneficiary."""
    txn_id = transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.EXPENSE,
        date=date(2024, 3, 1),
        amount=Decimal("100"),
    )

    with pytest.raises(ValidationError):
        transaction_service.update_transaction(txn_id, type=TransactionType.CONTRIBUTION)

    assert transaction_service.get_transaction(txn_id).type == TransactionType.EXPENSE


def test_update_unknown_field(transaction_service, sample_project):
    txn_id = transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.EXPENSE,
        date=date(2024, 3, 1),
        amount=Decimal("100"),
    )

    with pytest.raises(ValidationError, match="project_id"):
        transaction_service.update_transaction(txn_id, project_id=2)


def test_update_entry_of_deleted_partner(
    transaction_service, partner_service, sample_project, sample_partners
):
    """Entries of a deleted partner can still be corrected."""
    ana = sample_partners["Ana"]
    txn_id = transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.CONTRIBUTION,
        date=date(2024, 3, 1),
        amount=Decimal("500"),
        beneficiary_id=ana.id,
    )
    partner_service.delete_partner(ana.id)

    transaction_service.update_transaction(txn_id, description="fixed typo", amount=Decimal("550"))

    txn = transaction_service.get_transaction(txn_id)
    assert txn.description == "fixed typo"
    assert txn.amount == Decimal("550")
    assert txn.beneficiary_id == ana.id


def test_update_to_unknown_partner_rejected(transaction_service, sample_project, sample_partners):
    txn_id = transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.CONTRIBUTION,
        date=date(2024, 3, 1),
        amount=Decimal("500"),
        beneficiary_id=sample_partners["Ana"].id,
    )

    with pytest.raises(NotFoundError):
        transaction_service.update_transaction(txn_id, beneficiary_id=999)

    assert transaction_service.get_transaction(txn_id).beneficiary_id == sample_partners["Ana"].id


def test_delete_transaction(transaction_service, sample_project):
    txn_id = transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.EXPENSE,
        date=date(2024, 3, 1),
        amount=Decimal("100"),
    )

    transaction_service.delete_transaction(txn_id)

    assert transaction_service.get_transaction(txn_id) is None
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction(txn_id)


def test_list_filters_and_search(transaction_service, sample_project, sample_partners):
    """Listing is newest first and supports type, period and text filters."""
    ana = sample_partners["Ana"]
    transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.CONTRIBUTION,
        date=date(2024, 2, 1),
        amount=Decimal("5000"),
        beneficiary_id=ana.id,
    )
    transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.EXPENSE,
        date=date(2024, 3, 1),
        amount=Decimal("750"),
        description="Cement bags",
        supplier="Depósito Central",
    )
    transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.EXPENSE,
        date=date(2024, 3, 15),
        amount=Decimal("120"),
        description="Bricklayer",
    )

    all_txns = transaction_service.list_transactions(sample_project.id)
    assert [t.date for t in all_txns] == [date(2024, 3, 15), date(2024, 3, 1), date(2024, 2, 1)]

    expenses = transaction_service.list_transactions(
        sample_project.id, types=[TransactionType.EXPENSE]
    )
    assert len(expenses) == 2

    march = transaction_service.list_transactions(
        sample_project.id, start_date=date(2024, 3, 1), end_date=date(2024, 3, 31)
    )
    assert len(march) == 2

    assert len(transaction_service.list_transactions(sample_project.id, search="cement")) == 1
    assert len(transaction_service.list_transactions(sample_project.id, search="depósito")) == 1
    assert len(transaction_service.list_transactions(sample_project.id, search="5000")) == 1


def test_clear_transactions(transaction_service, finance_service, sample_project, sample_partners):
    """Clearing removes every entry and budget goal of the project."""
    transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.EXPENSE,
        date=date(2024, 3, 1),
        amount=Decimal("100"),
    )
    transaction_service.create_transaction(
        project_id=sample_project.id,
        type=TransactionType.CONTRIBUTION,
        date=date(2024, 3, 1),
        amount=Decimal("100"),
        beneficiary_id=sample_partners["Ana"].id,
    )
    finance_service.set_forecast(sample_project.id, "2024-03", Decimal("1000"))

    assert transaction_service.clear_transactions(sample_project.id) == 2
    assert transaction_service.list_transactions(sample_project.id) == []
    result = finance_service.get_monthly_forecast(sample_project.id, "2024-03")
    assert not result.is_configured
