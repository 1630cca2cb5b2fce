"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


def project_not_found(project_id: int) -> str:
    """Return message for missing project."""
    return f"Project {project_id} not found"


def no_project() -> str:
    """Return message when the workspace has no project yet."""
    return "No project found. Create one with 'constructa project init NAME'"


def partner_not_found(partner_id: int) -> str:
    """Return message for missing partner."""
    return f"Partner {partner_id} not found"


def supplier_not_found(supplier_id: int) -> str:
    """Return message for missing supplier."""
    return f"Supplier {supplier_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def forecast_not_found(month: str) -> str:
    """Return message for a month without budget goal."""
    return f"No budget forecast set for {month}"


def negative_amount(field: str = "Amount") -> str:
    return f"{field} cannot be negative"


def duplicate_supplier(name: str) -> str:
    return f"Supplier with name '{name}' already exists"
