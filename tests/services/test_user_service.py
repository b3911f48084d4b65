import pytest

from salary_app.domain.errors import RecordNotFound
from salary_app.services import UserService


@pytest.fixture
def user_service(session_factory, audit_service) -> UserService:
    return UserService(session_factory, audit=audit_service)


def test_registration_normalises_email_and_is_audited(user_service, audit_service) -> None:
    user, created = user_service.register_user("Ada Lovelace", "  Ada@Example.COM ")

    assert created is True
    assert user.email == "ada@example.com"
    events = audit_service.list_events(event_types=["user_created"])
    assert [event.subject_id for event in events] == [user.id]


def test_existing_email_updates_the_same_user(user_service, audit_service) -> None:
    first, _ = user_service.register_user("Ada Lovelace", "ada@example.com")

    second, created = user_service.register_user("Ada King", "ADA@example.com")

    assert created is False
    assert second.id == first.id
    assert second.name == "Ada King"
    assert len(audit_service.list_events(event_types=["user_updated"])) == 1


def test_soft_delete_hides_user_and_registration_restores_it(user_service) -> None:
    user, _ = user_service.register_user("Ada Lovelace", "ada@example.com")

    deleted = user_service.delete_user(user.id)

    assert deleted.deleted_at is not None
    assert user_service.get_user(user.id) is None
    assert user_service.get_user(user.id, include_deleted=True) is not None
    with pytest.raises(RecordNotFound):
        user_service.delete_user(user.id)

    restored, created = user_service.register_user("Ada Lovelace", "ada@example.com")
    assert created is False
    assert restored.deleted_at is None


def test_blank_name_is_rejected(user_service) -> None:
    with pytest.raises(ValueError):
        user_service.register_user("  ", "ada@example.com")
