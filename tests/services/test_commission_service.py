from decimal import Decimal

import pytest

from salary_app.domain.errors import InvalidCommission


def test_default_falls_back_to_settings_without_a_policy_row(commission_service) -> None:
    detail = commission_service.get_default_commission()

    assert detail.amount == Decimal("500.00")
    assert detail.id is None
    assert commission_service.get_active_default() == Decimal("500.00")


def test_update_creates_the_policy_row_and_audits(commission_service, audit_service) -> None:
    detail = commission_service.update_default_commission("750", actor_id=None)

    assert detail.id is not None
    assert detail.amount == Decimal("750.00")
    assert commission_service.get_active_default() == Decimal("750.00")

    (event,) = audit_service.list_events(event_types=["system_action"])
    assert event.metadata == {"old_amount": "500.00", "new_amount": "750.00"}


def test_update_leaves_existing_salaries_untouched(
    commission_service, salary_service, make_user
) -> None:
    user_id = make_user()
    before = salary_service.create_or_update_salary(user_id, 50000)

    commission_service.update_default_commission(Decimal("1000"))

    after = salary_service.get_salary(user_id)
    assert after.commission == before.commission == Decimal("500.00")
    assert after.displayed_salary == before.displayed_salary


@pytest.mark.parametrize("amount", [-1, Decimal("50000.01"), "lots"])
def test_invalid_default_is_rejected(commission_service, amount) -> None:
    with pytest.raises(InvalidCommission):
        commission_service.update_default_commission(amount)
