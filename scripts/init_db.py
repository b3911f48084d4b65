#!/usr/bin/env python3
"""Create the salary schema and seed the default commission policy."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy.engine import Engine  # noqa: E402  (import after sys.path manipulation)

from salary_app.core import get_settings  # noqa: E402
from salary_app.core.log import get_logger, init_logging  # noqa: E402
from salary_app.db import create_all, create_sync_engine, get_sessionmaker  # noqa: E402
from salary_app.repositories import CommissionPolicyRepository  # noqa: E402

logger = get_logger(__name__)


def init_database(url: str | None = None) -> Engine:
    settings = get_settings()
    engine = create_sync_engine(url)
    create_all(engine)

    session_factory = get_sessionmaker(engine=engine)
    with session_factory.begin() as session:
        policy = CommissionPolicyRepository(session).get_or_create_active(
            settings.salary_policy.default_commission
        )
        logger.info("Default commission policy: %s", policy.amount)
    return engine


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--url", help="SQLAlchemy URL overriding the configured database")
    args = parser.parse_args(argv)

    settings = get_settings()
    init_logging(settings.logging)
    init_database(args.url)
    logger.info("Database initialised")
    return 0


if __name__ == "__main__":
    sys.exit(main())
