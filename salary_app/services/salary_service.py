"""Salary writes, commission updates, bulk updates and read-side helpers.

Every write follows the same shape: validate outside any transaction, take
the per-user process lock, open a transaction, lock the salary row, apply the
change together with its history entry, commit, and only then notify
listeners. A history entry is never committed without the salary change it
describes, and vice versa.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Protocol, Sequence

from sqlalchemy.orm import Session, sessionmaker

from salary_app.core.config import BulkTransactionMode, SalaryPolicySettings, get_settings
from salary_app.core.log import get_audit_logger, get_logger, timeit
from salary_app.domain.currency import CurrencyConverter
from salary_app.domain.errors import InvalidAmount, RecordNotFound, SalaryError, SalaryErrorKind
from salary_app.domain.money import calculate_displayed_salary, quantize_money
from salary_app.domain.records import HistoryEntryDetail, HistoryPage, SalaryDetail
from salary_app.domain.statistics import SalaryStatistics, summarize_salaries
from salary_app.domain.validation import (
    ValidatedSalary,
    check_commission,
    check_reason,
    validate_salary_input,
)
from salary_app.models import SalaryHistoryEntry, SalaryRecord, User
from salary_app.repositories import HistoryLedger, SalaryRepository, UserRepository

from .commission_service import CommissionPolicyService
from .locks import UserLockRegistry, user_locks

LOGGER = get_logger(__name__)
AUDIT_LOGGER = get_audit_logger("salaries")

DEFAULT_UPDATE_REASON = "Salary updated via admin panel"
DEFAULT_COMMISSION_REASON = "Commission update"
DEFAULT_BULK_REASON = "Bulk salary update"

SALARY_CREATED = "salary_created"
SALARY_UPDATED = "salary_updated"
COMMISSION_UPDATED = "commission_updated"


class CommissionDefaultReader(Protocol):
    def get_active_default(self) -> Decimal:
        ...


@dataclass(frozen=True, slots=True)
class SalaryChangeEvent:
    """Published after a salary write has committed."""

    event_type: str
    user_id: int
    salary: SalaryDetail
    history: HistoryEntryDetail | None
    actor_id: int | None
    reason: str


SalaryChangeListener = Callable[[SalaryChangeEvent], None]


@dataclass(frozen=True, slots=True)
class BulkSalaryUpdate:
    """One item of a bulk request; missing amount or currency keep the current value."""

    user_id: int
    local_amount: Any = None
    currency_code: str | None = None
    commission: Any = None
    reason: str = DEFAULT_BULK_REASON
    notes: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BulkSalaryUpdate":
        raw_user_id = data.get("user_id")
        if raw_user_id is None:
            raise RecordNotFound("Bulk item is missing user_id")
        try:
            user_id = int(raw_user_id)
        except (TypeError, ValueError) as exc:
            raise RecordNotFound(f"Invalid user_id: {raw_user_id!r}") from exc
        local_amount = data.get("local_amount", data.get("salary_local_currency"))
        currency_code = data.get("currency_code", data.get("local_currency_code"))
        return cls(
            user_id=user_id,
            local_amount=local_amount,
            currency_code=currency_code,
            commission=data.get("commission"),
            reason=data.get("reason") or DEFAULT_BULK_REASON,
            notes=data.get("notes"),
        )


@dataclass(frozen=True, slots=True)
class BulkItemResult:
    user_id: int | None
    success: bool
    salary: SalaryDetail | None = None
    error: str | None = None
    error_kind: SalaryErrorKind | None = None

    @classmethod
    def failure(cls, user_id: int | None, exc: SalaryError) -> "BulkItemResult":
        return cls(user_id=user_id, success=False, error=exc.message, error_kind=exc.kind)


@dataclass(frozen=True, slots=True)
class BulkUpdateSummary:
    results: tuple[BulkItemResult, ...]
    succeeded: int
    failed: int

    @property
    def total(self) -> int:
        return len(self.results)

    @classmethod
    def from_results(cls, results: Iterable[BulkItemResult]) -> "BulkUpdateSummary":
        collected = tuple(results)
        succeeded = sum(1 for result in collected if result.success)
        return cls(results=collected, succeeded=succeeded, failed=len(collected) - succeeded)


@dataclass(frozen=True, slots=True)
class _Amounts:
    local: Decimal | None
    currency_code: str | None
    euros: Decimal | None
    commission: Decimal | None
    displayed: Decimal | None

    @classmethod
    def of(cls, record: SalaryRecord | None) -> "_Amounts":
        if record is None:
            return cls(None, None, None, None, None)
        return cls(
            local=quantize_money(record.salary_local_currency),
            currency_code=record.local_currency_code,
            euros=quantize_money(record.salary_euros),
            commission=quantize_money(record.commission),
            displayed=quantize_money(record.displayed_salary),
        )

    def differs_from(self, other: "_Amounts") -> bool:
        return (self.local, self.euros, self.commission) != (
            other.local,
            other.euros,
            other.commission,
        )


@dataclass(frozen=True, slots=True)
class _WriteOutcome:
    salary: SalaryDetail
    event: SalaryChangeEvent


class SalaryService:
    """Orchestrates validated, serialized and audited salary changes."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        policy: SalaryPolicySettings | None = None,
        commission_reader: CommissionDefaultReader | None = None,
        converter: CurrencyConverter | None = None,
        locks: UserLockRegistry | None = None,
        listeners: Sequence[SalaryChangeListener] = (),
    ) -> None:
        self._session_factory = session_factory
        self._policy = policy or get_settings().salary_policy
        if commission_reader is None:
            commission_reader = CommissionPolicyService(session_factory, policy=self._policy)
        self._commission_reader = commission_reader
        self._converter = converter or CurrencyConverter()
        self._locks = locks if locks is not None else user_locks
        self._listeners: list[SalaryChangeListener] = list(listeners)

    @property
    def converter(self) -> CurrencyConverter:
        return self._converter

    @property
    def policy(self) -> SalaryPolicySettings:
        return self._policy

    def add_listener(self, listener: SalaryChangeListener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def create_or_update_salary(
        self,
        user_id: int,
        local_amount: Any,
        currency_code: str | None = "EUR",
        commission: Any = None,
        reason: str | None = DEFAULT_UPDATE_REASON,
        actor_id: int | None = None,
        notes: str | None = None,
    ) -> SalaryDetail:
        """Create the user's salary record or update it, logging history when amounts change.

        Raises the first ``SalaryError`` found by validation, or ``RecordNotFound``
        when the user does not exist. Nothing is written in either case.
        """

        validated = self._validate(local_amount, currency_code, commission, reason)
        default_commission = self._default_commission_for(validated)

        with self._locks.hold(user_id):
            with self._session_factory.begin() as session:
                user = self._require_user(session, user_id)
                record = SalaryRepository(session).get_by_user(user_id, for_update=True)
                outcome = self._write_salary(
                    session,
                    user,
                    record,
                    validated,
                    actor_id=actor_id,
                    notes=notes,
                    default_commission=default_commission,
                )

        AUDIT_LOGGER.info(
            "Salary %s for user %s",
            "created" if outcome.event.event_type == SALARY_CREATED else "updated",
            user_id,
            extra={
                "user_id": user_id,
                "actor_id": actor_id,
                "salary_euros": str(outcome.salary.salary_euros),
                "currency": outcome.salary.local_currency_code,
            },
        )
        self._notify([outcome.event])
        return outcome.salary

    def update_commission(
        self,
        user_id: int,
        new_commission: Any,
        actor_id: int | None = None,
        reason: str | None = DEFAULT_COMMISSION_REASON,
    ) -> SalaryDetail:
        """Set the commission of an existing salary record.

        A history entry is written even when the amount is unchanged.
        """

        commission = check_commission(new_commission, self._policy)
        if isinstance(commission, SalaryError):
            raise commission
        cleaned_reason = check_reason(reason)
        if isinstance(cleaned_reason, SalaryError):
            raise cleaned_reason

        with self._locks.hold(user_id):
            with self._session_factory.begin() as session:
                self._require_user(session, user_id)
                record = SalaryRepository(session).get_by_user(user_id, for_update=True)
                if record is None:
                    raise RecordNotFound(f"User {user_id} has no salary record")

                before = _Amounts.of(record)
                record.commission = commission
                record.recalculate_displayed_salary()
                session.flush()

                history = self._append_history(
                    session, record, before, actor_id=actor_id, reason=cleaned_reason
                )
                salary = SalaryDetail.from_row(record)

        AUDIT_LOGGER.info(
            "Commission updated for user %s",
            user_id,
            extra={
                "user_id": user_id,
                "actor_id": actor_id,
                "old_commission": str(before.commission),
                "new_commission": str(salary.commission),
            },
        )
        self._notify(
            [
                SalaryChangeEvent(
                    event_type=COMMISSION_UPDATED,
                    user_id=user_id,
                    salary=salary,
                    history=history,
                    actor_id=actor_id,
                    reason=cleaned_reason,
                )
            ]
        )
        return salary

    def bulk_update_salaries(
        self,
        updates: Iterable[BulkSalaryUpdate | Mapping[str, Any]],
        actor_id: int | None = None,
        *,
        mode: BulkTransactionMode | None = None,
    ) -> BulkUpdateSummary:
        """Apply many salary updates, reporting success or failure per item.

        In ``per_item`` mode each item commits on its own. In ``batch`` mode the
        whole request shares one transaction and each item runs in a savepoint,
        so failed items are rolled back while the others commit together.
        Results keep the input order.
        """

        mode = mode or self._policy.bulk_transaction_mode
        items: list[BulkSalaryUpdate | SalaryError] = []
        for update in updates:
            if isinstance(update, BulkSalaryUpdate):
                items.append(update)
                continue
            try:
                items.append(BulkSalaryUpdate.from_mapping(update))
            except SalaryError as exc:
                items.append(exc)

        default_commission = self._commission_reader.get_active_default()
        with timeit(
            "Bulk salary update",
            logger=LOGGER,
            unit="items",
            total=len(items),
        ) as timer:
            if mode is BulkTransactionMode.BATCH:
                results, events = self._bulk_in_batch(items, actor_id, default_commission)
            else:
                results, events = self._bulk_per_item(items, actor_id, default_commission)
            for result in results:
                timer.tick(result.success)

        summary = BulkUpdateSummary.from_results(results)
        LOGGER.info(
            "Bulk salary update finished: %s succeeded, %s failed",
            summary.succeeded,
            summary.failed,
            extra={"actor_id": actor_id, "mode": mode.value},
        )
        self._notify(events)
        return summary

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_salary(self, user_id: int) -> SalaryDetail | None:
        with self._session_factory() as session:
            record = SalaryRepository(session).get_by_user(user_id)
            return SalaryDetail.from_row(record) if record is not None else None

    def get_salary_history(
        self,
        user_id: int,
        *,
        start: date | datetime | None = None,
        end: date | datetime | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> HistoryPage:
        with self._session_factory() as session:
            ledger = HistoryLedger(session)
            rows = ledger.query_by_user(user_id, start=start, end=end, limit=limit, offset=offset)
            total = ledger.count_by_user(user_id, start=start, end=end)
            return HistoryPage(
                items=[HistoryEntryDetail.from_row(row) for row in rows],
                total=total,
                limit=limit,
                offset=offset,
            )

    def get_salary_statistics(self) -> SalaryStatistics:
        with self._session_factory() as session:
            rows = SalaryRepository(session).statistics_rows()
        return summarize_salaries(rows)

    def convert_to_euros(self, amount: Any, currency_code: str) -> Decimal:
        return self._converter.convert_to_euros(amount, currency_code)

    def get_exchange_rate(self, currency_code: str) -> Decimal:
        return self._converter.exchange_rate(currency_code)

    def get_supported_currencies(self) -> dict[str, Decimal]:
        return self._converter.rates()

    @staticmethod
    def calculate_displayed_salary(salary_euros: Any, commission: Any) -> Decimal:
        return calculate_displayed_salary(salary_euros, commission)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _validate(
        self,
        local_amount: Any,
        currency_code: str | None,
        commission: Any,
        reason: str | None,
    ) -> ValidatedSalary:
        outcome = validate_salary_input(
            local_amount,
            currency_code,
            commission,
            reason,
            converter=self._converter,
            bounds=self._policy,
        )
        if isinstance(outcome, SalaryError):
            raise outcome
        return outcome

    def _default_commission_for(self, validated: ValidatedSalary) -> Decimal | None:
        if validated.commission is not None:
            return None
        return self._commission_reader.get_active_default()

    @staticmethod
    def _require_user(session: Session, user_id: int) -> User:
        user = UserRepository(session).lock_active_user(user_id)
        if user is None:
            raise RecordNotFound(f"User {user_id} not found")
        return user

    def _write_salary(
        self,
        session: Session,
        user: User,
        record: SalaryRecord | None,
        validated: ValidatedSalary,
        *,
        actor_id: int | None,
        notes: str | None,
        default_commission: Decimal | None,
    ) -> _WriteOutcome:
        before = _Amounts.of(record)
        history: HistoryEntryDetail | None = None

        if record is None:
            commission = validated.commission
            if commission is None:
                commission = quantize_money(
                    default_commission
                    if default_commission is not None
                    else self._policy.default_commission
                )
            record = SalaryRecord(
                user_id=user.id,
                salary_local_currency=validated.local_amount,
                local_currency_code=validated.currency_code,
                salary_euros=validated.salary_euros,
                commission=commission,
                effective_date=date.today(),
                notes=notes,
            )
            record.recalculate_displayed_salary()
            SalaryRepository(session).add(record)
            if self._policy.record_initial_history:
                history = self._append_history(
                    session, record, before, actor_id=actor_id, reason=validated.reason
                )
            event_type = SALARY_CREATED
        else:
            record.salary_local_currency = validated.local_amount
            record.local_currency_code = validated.currency_code
            record.salary_euros = validated.salary_euros
            if validated.commission is not None:
                record.commission = validated.commission
            if notes is not None:
                record.notes = notes
            record.recalculate_displayed_salary()
            if before.differs_from(_Amounts.of(record)):
                record.effective_date = date.today()
                session.flush()
                history = self._append_history(
                    session, record, before, actor_id=actor_id, reason=validated.reason
                )
            else:
                session.flush()
            event_type = SALARY_UPDATED

        salary = SalaryDetail.from_row(record)
        return _WriteOutcome(
            salary=salary,
            event=SalaryChangeEvent(
                event_type=event_type,
                user_id=user.id,
                salary=salary,
                history=history,
                actor_id=actor_id,
                reason=validated.reason,
            ),
        )

    @staticmethod
    def _append_history(
        session: Session,
        record: SalaryRecord,
        before: _Amounts,
        *,
        actor_id: int | None,
        reason: str,
    ) -> HistoryEntryDetail:
        after = _Amounts.of(record)
        entry = SalaryHistoryEntry(
            user_id=record.user_id,
            salary_id=record.id,
            old_salary_local_currency=before.local,
            new_salary_local_currency=after.local,
            old_currency_code=before.currency_code,
            new_currency_code=after.currency_code,
            old_salary_euros=before.euros,
            new_salary_euros=after.euros,
            old_commission=before.commission,
            new_commission=after.commission,
            old_displayed_salary=before.displayed,
            new_displayed_salary=after.displayed,
            changed_by=actor_id,
            change_reason=reason,
            change_type=SalaryHistoryEntry.determine_change_type(
                before.local, after.local, before.commission, after.commission
            ).value,
        )
        HistoryLedger(session).append(entry)
        return HistoryEntryDetail.from_row(entry)

    def _apply_bulk_item(
        self,
        session: Session,
        item: BulkSalaryUpdate,
        actor_id: int | None,
        default_commission: Decimal,
    ) -> _WriteOutcome:
        user = self._require_user(session, item.user_id)
        record = SalaryRepository(session).get_by_user(item.user_id, for_update=True)

        local_amount = item.local_amount
        currency_code = item.currency_code
        if record is not None:
            if local_amount is None:
                local_amount = record.salary_local_currency
            if currency_code is None:
                currency_code = record.local_currency_code
        elif local_amount is None:
            raise InvalidAmount("Salary amount is required for users without a salary record")

        validated = self._validate(
            local_amount, currency_code or "EUR", item.commission, item.reason
        )
        return self._write_salary(
            session,
            user,
            record,
            validated,
            actor_id=actor_id,
            notes=item.notes,
            default_commission=default_commission,
        )

    def _bulk_per_item(
        self,
        items: Sequence[BulkSalaryUpdate | SalaryError],
        actor_id: int | None,
        default_commission: Decimal,
    ) -> tuple[list[BulkItemResult], list[SalaryChangeEvent]]:
        results: list[BulkItemResult] = []
        events: list[SalaryChangeEvent] = []
        for item in items:
            if isinstance(item, SalaryError):
                results.append(BulkItemResult.failure(None, item))
                continue
            try:
                with self._locks.hold(item.user_id):
                    with self._session_factory.begin() as session:
                        outcome = self._apply_bulk_item(
                            session, item, actor_id, default_commission
                        )
            except SalaryError as exc:
                LOGGER.warning(
                    "Bulk item for user %s rejected: %s",
                    item.user_id,
                    exc.message,
                    extra={"user_id": item.user_id, "error_kind": exc.kind.value},
                )
                results.append(BulkItemResult.failure(item.user_id, exc))
                continue
            results.append(BulkItemResult(user_id=item.user_id, success=True, salary=outcome.salary))
            events.append(outcome.event)
        return results, events

    def _bulk_in_batch(
        self,
        items: Sequence[BulkSalaryUpdate | SalaryError],
        actor_id: int | None,
        default_commission: Decimal,
    ) -> tuple[list[BulkItemResult], list[SalaryChangeEvent]]:
        results: list[BulkItemResult] = []
        events: list[SalaryChangeEvent] = []
        user_ids = [item.user_id for item in items if isinstance(item, BulkSalaryUpdate)]

        with self._locks.hold_many(user_ids):
            with self._session_factory.begin() as session:
                for item in items:
                    if isinstance(item, SalaryError):
                        results.append(BulkItemResult.failure(None, item))
                        continue
                    try:
                        with session.begin_nested():
                            outcome = self._apply_bulk_item(
                                session, item, actor_id, default_commission
                            )
                    except SalaryError as exc:
                        LOGGER.warning(
                            "Bulk item for user %s rejected: %s",
                            item.user_id,
                            exc.message,
                            extra={"user_id": item.user_id, "error_kind": exc.kind.value},
                        )
                        results.append(BulkItemResult.failure(item.user_id, exc))
                        continue
                    results.append(
                        BulkItemResult(user_id=item.user_id, success=True, salary=outcome.salary)
                    )
                    events.append(outcome.event)
        return results, events

    def _notify(self, events: Iterable[SalaryChangeEvent]) -> None:
        for event in events:
            for listener in self._listeners:
                try:
                    listener(event)
                except Exception:
                    # The salary change is already committed; a failing
                    # listener must not turn it into an error for the caller.
                    LOGGER.exception(
                        "Salary change listener failed",
                        extra={"event_type": event.event_type, "user_id": event.user_id},
                    )


__all__ = [
    "COMMISSION_UPDATED",
    "DEFAULT_BULK_REASON",
    "DEFAULT_COMMISSION_REASON",
    "DEFAULT_UPDATE_REASON",
    "SALARY_CREATED",
    "SALARY_UPDATED",
    "BulkItemResult",
    "BulkSalaryUpdate",
    "BulkUpdateSummary",
    "CommissionDefaultReader",
    "SalaryChangeEvent",
    "SalaryChangeListener",
    "SalaryService",
]
