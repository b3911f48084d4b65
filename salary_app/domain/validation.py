"""Ordered validation pipeline for salary and commission input.

Each check returns the error it found (or ``None``) instead of raising, so the
same pipeline serves single updates, which raise the first failure, and bulk
updates, which record it per item.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Protocol

from salary_app.core.formatting import format_currency

from .currency import CurrencyConverter, normalize_currency_code
from .errors import (
    InvalidAmount,
    InvalidCommission,
    InvalidReason,
    SalaryError,
    SalaryOutOfBounds,
    UnsupportedCurrency,
)
from .money import quantize_money, to_decimal


class SalaryBounds(Protocol):
    min_salary_euros: Decimal
    max_salary_euros: Decimal
    max_commission: Decimal


@dataclass(frozen=True, slots=True)
class ValidatedSalary:
    """Normalised input that passed every check."""

    local_amount: Decimal
    currency_code: str
    salary_euros: Decimal
    commission: Decimal | None
    reason: str


def _coerce(value: Any, error: Callable[[str], SalaryError], label: str) -> Decimal | SalaryError:
    try:
        return to_decimal(value)
    except TypeError:
        return error(f"{label} must be a number")


def check_amount(amount: Any) -> Decimal | SalaryError:
    value = _coerce(amount, InvalidAmount, "Salary")
    if isinstance(value, SalaryError):
        return value
    if value <= 0:
        return InvalidAmount("Salary must be greater than zero")
    return quantize_money(value)


def check_currency(currency_code: str | None, converter: CurrencyConverter) -> str | SalaryError:
    code = normalize_currency_code(currency_code)
    if not converter.is_supported(code):
        return UnsupportedCurrency(code)
    return code


def check_salary_bounds(salary_euros: Decimal, currency_code: str, bounds: SalaryBounds) -> SalaryError | None:
    if salary_euros < bounds.min_salary_euros:
        return SalaryOutOfBounds(
            f"Salary must be at least {format_currency(bounds.min_salary_euros)} "
            f"(equivalent in {currency_code})"
        )
    if salary_euros > bounds.max_salary_euros:
        return SalaryOutOfBounds(
            f"Salary cannot exceed {format_currency(bounds.max_salary_euros)} "
            f"(equivalent in {currency_code})"
        )
    return None


def check_commission(commission: Any, bounds: SalaryBounds) -> Decimal | SalaryError:
    value = _coerce(commission, InvalidCommission, "Commission")
    if isinstance(value, SalaryError):
        return value
    if value < 0:
        return InvalidCommission("Commission cannot be negative")
    if value > bounds.max_commission:
        return InvalidCommission(f"Commission cannot exceed {format_currency(bounds.max_commission)}")
    return quantize_money(value)


def check_reason(reason: str | None) -> str | SalaryError:
    cleaned = (reason or "").strip()
    if not cleaned:
        return InvalidReason("A reason is required for salary changes")
    return cleaned


def validate_salary_input(
    local_amount: Any,
    currency_code: str | None,
    commission: Any,
    reason: str | None,
    *,
    converter: CurrencyConverter,
    bounds: SalaryBounds,
) -> ValidatedSalary | SalaryError:
    """Run amount, currency, bounds, commission and reason checks in order."""

    amount = check_amount(local_amount)
    if isinstance(amount, SalaryError):
        return amount

    code = check_currency(currency_code, converter)
    if isinstance(code, SalaryError):
        return code

    salary_euros = converter.convert_to_euros(amount, code)
    bounds_error = check_salary_bounds(salary_euros, code, bounds)
    if bounds_error is not None:
        return bounds_error

    resolved_commission: Decimal | None = None
    if commission is not None:
        checked = check_commission(commission, bounds)
        if isinstance(checked, SalaryError):
            return checked
        resolved_commission = checked

    cleaned_reason = check_reason(reason)
    if isinstance(cleaned_reason, SalaryError):
        return cleaned_reason

    return ValidatedSalary(
        local_amount=amount,
        currency_code=code,
        salary_euros=salary_euros,
        commission=resolved_commission,
        reason=cleaned_reason,
    )


__all__ = [
    "SalaryBounds",
    "ValidatedSalary",
    "check_amount",
    "check_commission",
    "check_currency",
    "check_reason",
    "check_salary_bounds",
    "validate_salary_input",
]
