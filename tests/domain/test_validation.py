from decimal import Decimal

import pytest

from salary_app.core.config import SalaryPolicySettings
from salary_app.domain.currency import CurrencyConverter
from salary_app.domain.errors import (
    InvalidAmount,
    InvalidCommission,
    InvalidReason,
    SalaryOutOfBounds,
    UnsupportedCurrency,
)
from salary_app.domain.validation import ValidatedSalary, validate_salary_input

BOUNDS = SalaryPolicySettings()
CONVERTER = CurrencyConverter()


def _validate(amount, currency="EUR", commission=None, reason="Annual review"):
    return validate_salary_input(
        amount, currency, commission, reason, converter=CONVERTER, bounds=BOUNDS
    )


def test_valid_input_is_normalised() -> None:
    outcome = _validate("50000", "usd", commission=250, reason="  Promotion  ")

    assert outcome == ValidatedSalary(
        local_amount=Decimal("50000.00"),
        currency_code="USD",
        salary_euros=Decimal("42500.00"),
        commission=Decimal("250.00"),
        reason="Promotion",
    )


def test_missing_commission_stays_unresolved() -> None:
    outcome = _validate(50000)

    assert isinstance(outcome, ValidatedSalary)
    assert outcome.commission is None


@pytest.mark.parametrize("amount", [0, -10, "abc", None, float("nan")])
def test_non_positive_or_non_numeric_amounts_are_rejected(amount) -> None:
    assert isinstance(_validate(amount), InvalidAmount)


def test_tiny_positive_amount_fails_bounds_not_positivity() -> None:
    outcome = _validate(Decimal("0.004"))

    assert isinstance(outcome, SalaryOutOfBounds)


def test_sub_cent_commission_is_judged_before_rounding() -> None:
    assert isinstance(_validate(50000, commission=Decimal("-0.004")), InvalidCommission)
    rounded = _validate(50000, commission=Decimal("250.005"))
    assert rounded.commission == Decimal("250.01")


def test_amount_is_checked_before_currency() -> None:
    assert isinstance(_validate(0, "XYZ"), InvalidAmount)


def test_currency_is_checked_before_bounds() -> None:
    outcome = _validate(10, "XYZ")

    assert isinstance(outcome, UnsupportedCurrency)


def test_bounds_are_inclusive() -> None:
    assert isinstance(_validate(Decimal("1000.00")), ValidatedSalary)
    assert isinstance(_validate(Decimal("500000.00")), ValidatedSalary)


def test_below_minimum_reports_formatted_bound() -> None:
    outcome = _validate(Decimal("999.99"))

    assert isinstance(outcome, SalaryOutOfBounds)
    assert outcome.message == "Salary must be at least €1,000.00 (equivalent in EUR)"


def test_bounds_apply_to_the_euro_equivalent() -> None:
    # 600,000 USD is 510,000 EUR.
    outcome = _validate(600_000, "USD")

    assert isinstance(outcome, SalaryOutOfBounds)
    assert outcome.message == "Salary cannot exceed €500,000.00 (equivalent in USD)"
    assert isinstance(_validate(150_000, "JPY"), SalaryOutOfBounds)


def test_commission_limits() -> None:
    negative = _validate(50000, commission=-1)
    too_high = _validate(50000, commission=Decimal("50000.01"))

    assert isinstance(negative, InvalidCommission)
    assert negative.message == "Commission cannot be negative"
    assert isinstance(too_high, InvalidCommission)
    assert too_high.message == "Commission cannot exceed €50,000.00"
    assert isinstance(_validate(50000, commission=0), ValidatedSalary)
    assert isinstance(_validate(50000, commission=50000), ValidatedSalary)


@pytest.mark.parametrize("reason", ["", "   ", None])
def test_blank_reason_is_rejected(reason) -> None:
    assert isinstance(_validate(50000, reason=reason), InvalidReason)
