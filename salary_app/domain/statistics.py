"""Aggregate helpers for salary reporting."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Sequence

from .money import quantize_money, to_decimal

ZERO = Decimal("0.00")


@dataclass(frozen=True, slots=True)
class SalaryStatistics:
    """Summary figures across all current salary records."""

    count: int = 0
    average_euros: Decimal = ZERO
    median_euros: Decimal = ZERO
    min_euros: Decimal = ZERO
    max_euros: Decimal = ZERO
    total_commission: Decimal = ZERO
    average_commission: Decimal = ZERO
    currency_distribution: dict[str, int] = field(default_factory=dict)


def median(values: Iterable[Decimal]) -> Decimal:
    """Middle value of the sorted input; mean of the two middle values for even counts."""

    ordered: Sequence[Decimal] = sorted(to_decimal(value) for value in values)
    count = len(ordered)
    if count == 0:
        return ZERO
    middle = count // 2
    if count % 2 == 0:
        return quantize_money((ordered[middle - 1] + ordered[middle]) / 2)
    return quantize_money(ordered[middle])


def average(values: Sequence[Decimal]) -> Decimal:
    if not values:
        return ZERO
    return quantize_money(sum(values, Decimal(0)) / len(values))


def summarize_salaries(rows: Iterable[tuple[Decimal, Decimal, str]]) -> SalaryStatistics:
    """Build :class:`SalaryStatistics` from ``(salary_euros, commission, currency)`` rows."""

    euros: list[Decimal] = []
    commissions: list[Decimal] = []
    currencies: Counter[str] = Counter()
    for salary_euros, commission, currency_code in rows:
        euros.append(to_decimal(salary_euros))
        commissions.append(to_decimal(commission))
        currencies[currency_code] += 1

    if not euros:
        return SalaryStatistics()

    return SalaryStatistics(
        count=len(euros),
        average_euros=average(euros),
        median_euros=median(euros),
        min_euros=quantize_money(min(euros)),
        max_euros=quantize_money(max(euros)),
        total_commission=quantize_money(sum(commissions, Decimal(0))),
        average_commission=average(commissions),
        currency_distribution=dict(sorted(currencies.items())),
    )
