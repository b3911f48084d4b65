"""Error taxonomy for salary operations.

Every error is a caller-recoverable validation failure. Each carries a
``kind`` so HTTP handlers and bulk results can report it without matching on
class names.
"""
from __future__ import annotations

from enum import Enum


class SalaryErrorKind(str, Enum):
    INVALID_AMOUNT = "invalid_amount"
    UNSUPPORTED_CURRENCY = "unsupported_currency"
    SALARY_OUT_OF_BOUNDS = "salary_out_of_bounds"
    INVALID_COMMISSION = "invalid_commission"
    RECORD_NOT_FOUND = "record_not_found"
    INVALID_REASON = "invalid_reason"


class SalaryError(ValueError):
    """Base class for expected salary validation failures."""

    kind: SalaryErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class InvalidAmount(SalaryError):
    kind = SalaryErrorKind.INVALID_AMOUNT


class UnsupportedCurrency(SalaryError):
    kind = SalaryErrorKind.UNSUPPORTED_CURRENCY

    def __init__(self, currency_code: str) -> None:
        super().__init__(f"Unsupported currency code: {currency_code}")
        self.currency_code = currency_code


class SalaryOutOfBounds(SalaryError):
    kind = SalaryErrorKind.SALARY_OUT_OF_BOUNDS


class InvalidCommission(SalaryError):
    kind = SalaryErrorKind.INVALID_COMMISSION


class RecordNotFound(SalaryError):
    kind = SalaryErrorKind.RECORD_NOT_FOUND


class InvalidReason(SalaryError):
    kind = SalaryErrorKind.INVALID_REASON


class ImmutableRecordError(RuntimeError):
    """Raised when code attempts to modify or delete an append-only row."""
