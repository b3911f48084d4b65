from decimal import Decimal

import pytest

from salary_app.domain.currency import EXCHANGE_RATES, CurrencyConverter
from salary_app.domain.errors import SalaryErrorKind, UnsupportedCurrency


def test_usd_amount_converts_with_half_up_rounding() -> None:
    converter = CurrencyConverter()

    assert converter.convert_to_euros(Decimal("33333.33"), "USD") == Decimal("28333.33")
    assert converter.convert_to_euros(Decimal("50000.00"), "USD") == Decimal("42500.00")


def test_small_rate_currencies_keep_two_decimals() -> None:
    converter = CurrencyConverter()

    assert converter.convert_to_euros(1_000_000, "JPY") == Decimal("6500.00")
    assert converter.convert_to_euros(Decimal("12345.67"), "SEK") == Decimal("1049.38")


def test_float_input_does_not_leak_binary_noise() -> None:
    converter = CurrencyConverter()

    assert converter.convert_to_euros(0.1, "EUR") == Decimal("0.10")


def test_currency_codes_are_case_insensitive() -> None:
    converter = CurrencyConverter()

    assert converter.is_supported("gbp")
    assert converter.exchange_rate(" usd ") == Decimal("0.85")


def test_unknown_currency_is_rejected() -> None:
    converter = CurrencyConverter()

    with pytest.raises(UnsupportedCurrency) as excinfo:
        converter.convert_to_euros(100, "XYZ")

    assert excinfo.value.kind is SalaryErrorKind.UNSUPPORTED_CURRENCY
    assert excinfo.value.message == "Unsupported currency code: XYZ"


def test_rate_table_lists_every_supported_currency_sorted() -> None:
    converter = CurrencyConverter()

    rates = converter.rates()

    assert list(rates) == sorted(EXCHANGE_RATES)
    assert converter.supported_currencies() == frozenset(EXCHANGE_RATES)
    assert rates["EUR"] == Decimal("1.00")


def test_custom_rate_table() -> None:
    converter = CurrencyConverter({"usd": "0.90"})

    assert converter.supported_currencies() == frozenset({"USD"})
    assert converter.convert_to_euros(100, "USD") == Decimal("90.00")
    assert not converter.is_supported("EUR")
