"""Static currency table and conversion to euros.

Rates are fixed configuration, not a live FX feed.
"""
from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping

from .errors import UnsupportedCurrency
from .money import quantize_money, to_decimal

EXCHANGE_RATES: Mapping[str, Decimal] = MappingProxyType(
    {
        "USD": Decimal("0.85"),
        "GBP": Decimal("1.15"),
        "EUR": Decimal("1.00"),
        "CAD": Decimal("0.65"),
        "AUD": Decimal("0.60"),
        "JPY": Decimal("0.0065"),
        "CHF": Decimal("0.95"),
        "SEK": Decimal("0.085"),
        "NOK": Decimal("0.082"),
        "DKK": Decimal("0.134"),
    }
)


def normalize_currency_code(currency_code: str | None) -> str:
    return (currency_code or "").strip().upper()


class CurrencyConverter:
    """Convert local-currency amounts to euros using a fixed rate table."""

    def __init__(self, rates: Mapping[str, Any] | None = None) -> None:
        source = EXCHANGE_RATES if rates is None else rates
        self._rates: dict[str, Decimal] = {
            normalize_currency_code(code): to_decimal(rate) for code, rate in source.items()
        }

    def is_supported(self, currency_code: str | None) -> bool:
        return normalize_currency_code(currency_code) in self._rates

    def supported_currencies(self) -> frozenset[str]:
        return frozenset(self._rates)

    def rates(self) -> dict[str, Decimal]:
        """Return a copy of the rate table, ordered by currency code."""

        return {code: self._rates[code] for code in sorted(self._rates)}

    def exchange_rate(self, currency_code: str) -> Decimal:
        code = normalize_currency_code(currency_code)
        try:
            return self._rates[code]
        except KeyError:
            raise UnsupportedCurrency(code) from None

    def convert_to_euros(self, amount: Any, currency_code: str) -> Decimal:
        """Return ``amount * rate`` rounded half-up to two decimals."""

        rate = self.exchange_rate(currency_code)
        return quantize_money(to_decimal(amount) * rate)
