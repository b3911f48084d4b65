"""Configuration system for the salary application."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from functools import lru_cache
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

_FALSE_VALUES = {"0", "false", "False", "no", ""}


class BulkTransactionMode(str, Enum):
    """Transaction boundary used by bulk salary updates."""

    PER_ITEM = "per_item"
    BATCH = "batch"


@dataclass(frozen=True, slots=True)
class DatabaseSettings:
    """Connection details for the transactional database."""

    driver: str = "mysql+pymysql"
    host: str = "127.0.0.1"
    port: int = 3306
    user: str = "salaries"
    password: str = "salaries"
    name: str = "salaries"
    url_override: str | None = None

    @property
    def sqlalchemy_url(self) -> str:
        """Build a SQLAlchemy compatible URL."""

        if self.url_override:
            return self.url_override
        if self.password:
            credentials = f"{self.user}:{self.password}"
        else:
            credentials = self.user
        return f"{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"


@dataclass(frozen=True, slots=True)
class SalaryPolicySettings:
    """Business bounds and behaviour flags for salary writes."""

    min_salary_euros: Decimal = Decimal("1000.00")
    max_salary_euros: Decimal = Decimal("500000.00")
    max_commission: Decimal = Decimal("50000.00")
    default_commission: Decimal = Decimal("500.00")
    bulk_transaction_mode: BulkTransactionMode = BulkTransactionMode.PER_ITEM
    record_initial_history: bool = False


@dataclass(frozen=True, slots=True)
class LoggingSettings:
    """Logging destinations and verbosity."""

    level: str = "INFO"
    log_dir: Path | None = Path("logs")


@dataclass(frozen=True, slots=True)
class Settings:
    """Top-level application configuration container."""

    database: DatabaseSettings
    salary_policy: SalaryPolicySettings
    logging: LoggingSettings
    sqlalchemy_echo: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Load configuration values from environment variables."""

        def _get_env(name: str, default: str) -> str:
            return os.getenv(name, default)

        def _get_decimal(name: str, default: Decimal) -> Decimal:
            raw_value = _get_env(name, str(default))
            try:
                return Decimal(raw_value)
            except InvalidOperation as exc:
                raise ValueError(f"{name} must be a decimal number, got {raw_value!r}") from exc

        defaults = DatabaseSettings()
        db = DatabaseSettings(
            driver=_get_env("DB_DRIVER", defaults.driver),
            host=_get_env("DB_HOST", defaults.host),
            port=int(_get_env("DB_PORT", str(defaults.port))),
            user=_get_env("DB_USER", defaults.user),
            password=_get_env("DB_PASSWORD", defaults.password),
            name=_get_env("DB_NAME", defaults.name),
            url_override=os.getenv("DATABASE_URL") or None,
        )

        policy_defaults = SalaryPolicySettings()
        raw_mode = _get_env("BULK_TRANSACTION_MODE", policy_defaults.bulk_transaction_mode.value)
        try:
            bulk_mode = BulkTransactionMode(raw_mode.strip().lower())
        except ValueError as exc:
            raise ValueError(
                "BULK_TRANSACTION_MODE must be one of: "
                + ", ".join(mode.value for mode in BulkTransactionMode)
            ) from exc

        policy = SalaryPolicySettings(
            min_salary_euros=_get_decimal("SALARY_MIN_EUROS", policy_defaults.min_salary_euros),
            max_salary_euros=_get_decimal("SALARY_MAX_EUROS", policy_defaults.max_salary_euros),
            max_commission=_get_decimal("COMMISSION_MAX", policy_defaults.max_commission),
            default_commission=_get_decimal("COMMISSION_DEFAULT", policy_defaults.default_commission),
            bulk_transaction_mode=bulk_mode,
            record_initial_history=_get_env("RECORD_INITIAL_HISTORY", "0") not in _FALSE_VALUES,
        )
        if policy.min_salary_euros > policy.max_salary_euros:
            raise ValueError("SALARY_MIN_EUROS cannot exceed SALARY_MAX_EUROS")

        raw_log_dir = _get_env("LOG_DIR", "logs")
        logging_settings = LoggingSettings(
            level=_get_env("LOG_LEVEL", "INFO"),
            log_dir=Path(raw_log_dir) if raw_log_dir else None,
        )

        return cls(
            database=db,
            salary_policy=policy,
            logging=logging_settings,
            sqlalchemy_echo=_get_env("SQLALCHEMY_ECHO", "0") not in _FALSE_VALUES,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    settings = Settings.from_env()

    # Import locally to avoid circular dependencies during module import time.
    from .log import get_logger

    logger = get_logger(__name__)
    logger.debug(
        "Settings initialised",
        extra={
            "sqlalchemy_echo": settings.sqlalchemy_echo,
            "database": {
                "driver": settings.database.driver,
                "host": settings.database.host,
                "port": settings.database.port,
                "name": settings.database.name,
                "user": settings.database.user,
            },
            "salary_policy": {
                "min_salary_euros": str(settings.salary_policy.min_salary_euros),
                "max_salary_euros": str(settings.salary_policy.max_salary_euros),
                "max_commission": str(settings.salary_policy.max_commission),
                "bulk_transaction_mode": settings.salary_policy.bulk_transaction_mode.value,
                "record_initial_history": settings.salary_policy.record_initial_history,
            },
        },
    )
    return settings
