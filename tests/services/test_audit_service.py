from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from salary_app.core.log import log_context
from salary_app.domain.errors import RecordNotFound
from salary_app.models import ChangeType, SalaryHistoryEntry, SalaryRecord
from salary_app.repositories import HistoryLedger
from salary_app.services import AuditService, BulkItemResult


def test_unknown_event_type_is_rejected(audit_service: AuditService) -> None:
    with pytest.raises(ValueError):
        audit_service.log_user_action("salary_deleted")


def test_event_description_defaults_to_event_name_and_subject(audit_service) -> None:
    event = audit_service.log_user_action(
        "file_verified", subject_type="UploadedDocument", subject_id=12
    )

    assert event.description == "File Verified - UploadedDocument #12"
    assert "timestamp" in event.metadata


def test_request_context_is_stored_with_the_event(audit_service) -> None:
    with log_context.scoped(request_id="req-42"):
        event = audit_service.log_user_action("system_action", metadata={"job": "reindex"})

    assert event.metadata["context"] == {"request_id": "req-42"}
    assert event.metadata["job"] == "reindex"
    assert event.description == "System Action"


def test_salary_changes_are_audited_through_the_listener(
    salary_service, audit_service, make_user
) -> None:
    salary_service.add_listener(audit_service.record_salary_change)
    admin_id = make_user("Grace Hopper")
    user_id = make_user()

    salary_service.create_or_update_salary(user_id, 50000, actor_id=admin_id)
    salary_service.create_or_update_salary(user_id, 55000, actor_id=admin_id, reason="Promotion")
    salary_service.update_commission(user_id, 900, actor_id=admin_id)

    events = audit_service.list_events(actor_id=admin_id)
    assert [event.event_type for event in events] == [
        "commission_updated",
        "salary_updated",
        "salary_created",
    ]
    updated = events[1]
    assert updated.subject_type == "Salary"
    assert updated.metadata["reason"] == "Promotion"
    assert updated.metadata["changes"]["salary_euros"] == {"old": "50000.00", "new": "55000.00"}
    assert updated.description == f"Salary Updated for user #{user_id}"


def test_bulk_operation_counts_outcomes(audit_service) -> None:
    event = audit_service.log_bulk_operation(
        "salary_update",
        [
            BulkItemResult(user_id=1, success=True),
            BulkItemResult(user_id=2, success=False, error="Unsupported currency code: XYZ"),
            {"user_id": 3, "success": True},
        ],
        actor_id=None,
    )

    assert event.description == "Bulk salary_update: 2 successful, 1 failed"
    assert event.metadata["total_records"] == 3
    assert event.metadata["results"][1]["error"] == "Unsupported currency code: XYZ"


def test_list_events_filters_by_type(audit_service) -> None:
    audit_service.log_user_action("system_action")
    audit_service.log_file_uploaded(7, "contract.pdf", file_size=1024, mime_type="application/pdf")
    audit_service.log_file_deleted(7, "contract.pdf", reason="Superseded")

    events = audit_service.list_events(event_types=["file_uploaded", "file_deleted"])

    assert {event.event_type for event in events} == {"file_uploaded", "file_deleted"}
    assert all(event.metadata["user_id"] == 7 for event in events)


def _seed_history(session_factory, user_id: int, actor_id: int, rows) -> None:
    with session_factory.begin() as session:
        record = SalaryRecord(
            user_id=user_id,
            salary_local_currency=Decimal("50000.00"),
            local_currency_code="EUR",
            salary_euros=Decimal("50000.00"),
            commission=Decimal("500.00"),
        )
        session.add(record)
        session.flush()
        ledger = HistoryLedger(session)
        for created_at, old, new, old_commission, new_commission in rows:
            ledger.append(
                SalaryHistoryEntry(
                    user_id=user_id,
                    salary_id=record.id,
                    old_salary_local_currency=Decimal(old),
                    new_salary_local_currency=Decimal(new),
                    old_currency_code="EUR",
                    new_currency_code="EUR",
                    old_salary_euros=Decimal(old),
                    new_salary_euros=Decimal(new),
                    old_commission=Decimal(old_commission),
                    new_commission=Decimal(new_commission),
                    old_displayed_salary=Decimal(old) + Decimal(old_commission),
                    new_displayed_salary=Decimal(new) + Decimal(new_commission),
                    changed_by=actor_id,
                    change_reason="Seeded",
                    change_type=SalaryHistoryEntry.determine_change_type(
                        Decimal(old), Decimal(new), Decimal(old_commission), Decimal(new_commission)
                    ).value,
                    created_at=created_at,
                )
            )


def test_audit_statistics_over_a_window(audit_service, session_factory, make_user) -> None:
    admin_id = make_user("Grace Hopper")
    user_id = make_user()
    day = datetime(2026, 4, 10, 12, tzinfo=timezone.utc)
    _seed_history(
        session_factory,
        user_id,
        admin_id,
        [
            (day, "50000", "52000", "500", "500"),
            (day + timedelta(hours=1), "52000", "51000", "500", "500"),
            (day + timedelta(hours=2), "51000", "51000", "500", "700"),
            (day + timedelta(days=3), "51000", "53000", "700", "700"),
        ],
    )

    statistics = audit_service.get_audit_statistics(date(2026, 4, 1), date(2026, 4, 30))

    assert statistics.total_salary_changes == 4
    assert statistics.salary_increases == 2
    assert statistics.salary_decreases == 1
    assert statistics.commission_changes == 1
    assert statistics.unique_users_affected == 1
    assert statistics.unique_actors_active == 1
    assert statistics.average_changes_per_day == Decimal("0.14")
    assert statistics.most_active_day == date(2026, 4, 10)
    assert statistics.change_types_distribution == {
        ChangeType.SALARY_CHANGE.value: 3,
        ChangeType.COMMISSION_CHANGE.value: 1,
    }
    assert statistics.summary == "4 salary changes, 2 increases, 1 decreases, 1 users affected"

    empty = audit_service.get_audit_statistics(date(2025, 1, 1), date(2025, 1, 31))
    assert empty.total_salary_changes == 0
    assert empty.most_active_day is None
    assert empty.summary == "No activity recorded"


def test_user_activity_summary_defaults_to_last_thirty_days(
    salary_service, audit_service, make_user
) -> None:
    user_id = make_user()
    salary_service.create_or_update_salary(user_id, 50000)
    salary_service.create_or_update_salary(user_id, 51000)
    salary_service.create_or_update_salary(user_id, 52000)

    summary = audit_service.get_user_activity_summary(user_id)

    assert summary.user.id == user_id
    assert summary.total_salary_changes == 2
    assert summary.salary_changes[0].new_salary_euros == Decimal("52000.00")
    assert summary.last_salary_change == summary.salary_changes[0].created_at
    assert summary.end - summary.start == timedelta(days=30)

    with pytest.raises(RecordNotFound):
        audit_service.get_user_activity_summary(9999)
