"""Text formatting helpers for CLI output."""

from decimal import Decimal

from constructa.utils.money import quantize_cents


def format_money(value: Decimal) -> str:
    """Format an amount as currency, e.g. 'R$ 1,234.50' or '-R$ 20.00'."""
    value = quantize_cents(Decimal(value))
    sign = "-" if value < 0 else ""
    return f"{sign}R$ {abs(value):,.2f}"


def format_percent(value: Decimal) -> str:
    return f"{Decimal(value):.1f}%"


def progress_bar(progress: Decimal, width: int = 20) -> str:
    """Render a progress percentage as a fixed-width text bar."""
    filled = int(min(max(progress, Decimal("0")), Decimal("100")) * width / 100)
    return "[" + "#" * filled + "." * (width - filled) + "]"


def choice_values(enum_type) -> list[str]:
    """Enum values for click.Choice."""
    return [member.value for member in enum_type]
