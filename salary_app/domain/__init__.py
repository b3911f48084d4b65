"""Pure salary domain logic: money, currency conversion, validation, statistics."""

from .currency import EXCHANGE_RATES, CurrencyConverter
from .errors import (
    ImmutableRecordError,
    InvalidAmount,
    InvalidCommission,
    InvalidReason,
    RecordNotFound,
    SalaryError,
    SalaryErrorKind,
    SalaryOutOfBounds,
    UnsupportedCurrency,
)
from .money import calculate_displayed_salary, quantize_money, to_decimal

__all__ = [
    "EXCHANGE_RATES",
    "CurrencyConverter",
    "ImmutableRecordError",
    "InvalidAmount",
    "InvalidCommission",
    "InvalidReason",
    "RecordNotFound",
    "SalaryError",
    "SalaryErrorKind",
    "SalaryOutOfBounds",
    "UnsupportedCurrency",
    "calculate_displayed_salary",
    "quantize_money",
    "to_decimal",
]
