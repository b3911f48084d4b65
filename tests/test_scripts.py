from decimal import Decimal

from sqlalchemy import func, select

from salary_app.db import get_sessionmaker
from salary_app.models import CommissionPolicy
from scripts.init_db import init_database


def test_init_database_seeds_one_active_policy(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'init.db'}"

    init_database(url)
    engine = init_database(url)

    try:
        with get_sessionmaker(engine=engine)() as session:
            assert session.execute(select(func.count(CommissionPolicy.id))).scalar_one() == 1
            policy = session.execute(select(CommissionPolicy)).scalar_one()
            assert policy.amount == Decimal("500.00")
            assert policy.is_active is True
    finally:
        engine.dispose()
