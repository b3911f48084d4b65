"""Decimal helpers for monetary amounts."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce ``value`` to ``Decimal`` without inheriting float noise.

    Floats go through ``str`` so ``0.85`` stays ``Decimal("0.85")``.
    """

    if value is None or isinstance(value, bool):
        raise TypeError(f"Cannot convert {value!r} to Decimal")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise TypeError(f"Cannot convert {value!r} to Decimal") from exc
    if not result.is_finite():
        raise TypeError(f"Cannot convert {value!r} to a finite Decimal")
    return result


def quantize_money(value: Any) -> Decimal:
    """Round to two decimal places using half-up rounding."""

    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_displayed_salary(salary_euros: Any, commission: Any) -> Decimal:
    """Return the displayed total (euro salary plus commission)."""

    return quantize_money(to_decimal(salary_euros) + to_decimal(commission))
