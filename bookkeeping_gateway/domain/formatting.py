"""Money rounding and display formatting"""

from bookkeeping_gateway.config import settings


def round_money(amount: float) -> float:
    """Round to cents; normalizes -0.0 to 0.0"""
    return round(float(amount), 2) + 0.0


def clamp_non_negative(amount: float | None) -> float:
    return amount if amount and amount > 0 else 0.0


def format_currency(amount: float, symbol: str | None = None) -> str:
    """
    Format an amount for display.

    Example:
        1234.5 -> "Ksh 1,234.50"
        -12    -> "-Ksh 12.00"
    """
    symbol = symbol or settings.currency_symbol
    value = round_money(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol} {abs(value):,.2f}"
