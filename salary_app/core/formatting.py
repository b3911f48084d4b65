"""Helper functions for formatting money amounts."""

from __future__ import annotations
from decimal import Decimal


def format_currency(
    value: int | float | Decimal | None,
    symbol: str = "€",
    decimals: int = 2,
) -> str:
    """Format an amount with thousands separators, e.g. ``€1,234.50``.

    ``None`` renders as ``N/A`` so partially populated history rows stay readable.
    """
    if value is None:
        return "N/A"
    d = Decimal(str(value))
    sign = "-" if d < 0 else ""
    return f"{sign}{symbol}{abs(d):,.{decimals}f}"


def format_signed_currency(
    value: int | float | Decimal | None,
    symbol: str = "€",
    decimals: int = 2,
) -> str:
    """Format a change amount with an explicit sign, e.g. ``+€50.00``."""
    if value is None:
        return "N/A"
    d = Decimal(str(value))
    prefix = "+" if d >= 0 else ""
    return f"{prefix}{format_currency(d, symbol=symbol, decimals=decimals)}"
