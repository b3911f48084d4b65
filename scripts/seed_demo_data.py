#!/usr/bin/env python3
"""Populate a database with demo users, salaries and salary history."""
from __future__ import annotations

import argparse
import random
import sys
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Sequence

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from faker import Faker  # noqa: E402

from salary_app.core import get_settings  # noqa: E402
from salary_app.core.log import get_logger, init_logging, log_context, timeit  # noqa: E402
from salary_app.db import get_sessionmaker  # noqa: E402
from salary_app.services import (  # noqa: E402
    AuditService,
    BulkSalaryUpdate,
    SalaryService,
    UserService,
)
from scripts.init_db import init_database  # noqa: E402

logger = get_logger(__name__)


@dataclass(frozen=True)
class LocaleConfig:
    """Faker locale paired with the currency its employees are paid in."""

    locale: str
    currency_code: str
    weight: int


LOCALES: Sequence[LocaleConfig] = (
    LocaleConfig(locale="nl_NL", currency_code="EUR", weight=4),
    LocaleConfig(locale="en_GB", currency_code="GBP", weight=2),
    LocaleConfig(locale="en_US", currency_code="USD", weight=2),
    LocaleConfig(locale="en_CA", currency_code="CAD", weight=1),
    LocaleConfig(locale="en_AU", currency_code="AUD", weight=1),
)

RAISE_REASONS = (
    "Annual performance review",
    "Promotion to senior role",
    "Market rate adjustment",
    "Cost of living adjustment",
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--users", type=int, default=25, help="Number of employees to create")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducibility")
    parser.add_argument("--url", help="SQLAlchemy URL overriding the configured database")
    return parser.parse_args(argv)


def seed(users: int, *, seed_value: int, url: str | None = None) -> None:
    rng = random.Random(seed_value)
    fakers = {config.locale: Faker(config.locale) for config in LOCALES}
    for index, faker in enumerate(fakers.values()):
        faker.seed_instance(seed_value + index)

    session_factory = get_sessionmaker(engine=init_database(url))
    audit = AuditService(session_factory)
    user_service = UserService(session_factory, audit=audit)
    salary_service = SalaryService(session_factory, listeners=[audit.record_salary_change])

    admin, _ = user_service.register_user("Payroll Admin", "payroll.admin@example.com")
    employees: list[tuple[int, LocaleConfig]] = []

    with log_context.scoped(actor_id=admin.id), timeit(
        "Seeding employees", logger=logger, unit="users", total=users
    ) as timer:
        for index in range(users):
            config = rng.choices(LOCALES, weights=[c.weight for c in LOCALES])[0]
            faker = fakers[config.locale]
            name = faker.name()
            email = f"{faker.user_name()}.{index}@example.com"
            user, _ = user_service.register_user(name, email, actor_id=admin.id)

            amount = Decimal(rng.randrange(30_000_00, 150_000_00)) / 100
            salary_service.create_or_update_salary(
                user.id,
                amount,
                config.currency_code,
                reason="Initial salary",
                actor_id=admin.id,
            )
            employees.append((user.id, config))
            timer.tick()

    raises = [
        BulkSalaryUpdate(
            user_id=user_id,
            local_amount=(
                salary_service.get_salary(user_id).salary_local_currency
                * Decimal(rng.choice(("1.02", "1.03", "1.05", "1.10")))
            ),
            reason=rng.choice(RAISE_REASONS),
        )
        for user_id, _ in rng.sample(employees, k=len(employees) // 2)
    ]
    summary = salary_service.bulk_update_salaries(raises, actor_id=admin.id)
    audit.log_bulk_operation("salary_update", summary.results, actor_id=admin.id)
    logger.info(
        "Seeded %s employees, %s raises applied",
        len(employees),
        summary.succeeded,
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    init_logging(settings.logging)
    seed(args.users, seed_value=args.seed, url=args.url)
    return 0


if __name__ == "__main__":
    sys.exit(main())
