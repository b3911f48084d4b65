import logging

import pytest

from salary_app.core.log import (
    get_audit_logger,
    get_logger,
    init_logging,
    log_context,
    shutdown_logging,
)


@pytest.fixture()
def file_logging(tmp_path):
    init_logging(log_dir=tmp_path, console=False, queue=False, level="INFO")
    yield tmp_path
    shutdown_logging()


def _read_logs(directory, prefix: str) -> str:
    for handler in logging.getLogger().handlers:
        handler.flush()
    files = [p for p in directory.glob("*.log") if p.name.startswith(prefix)]
    if prefix == "":
        files = [p for p in files if not p.name.startswith("audit_")]
    assert len(files) == 1
    return files[0].read_text(encoding="utf-8")


def test_audit_channel_writes_to_its_own_file(file_logging) -> None:
    get_logger("salary_app.services.test").info("plain application message")
    get_audit_logger("salaries").info("Salary updated for user 7")

    app_log = _read_logs(file_logging, "")
    audit_log = _read_logs(file_logging, "audit_")

    assert "plain application message" in app_log
    assert "Salary updated for user 7" in app_log
    assert "Salary updated for user 7" in audit_log
    assert "plain application message" not in audit_log


def test_bound_context_is_rendered_in_file_output(file_logging) -> None:
    with log_context.scoped(request_id="abc123", actor_id=3):
        get_logger("salary_app.test").warning("bulk run started")

    app_log = _read_logs(file_logging, "")
    assert "request_id=abc123 actor_id=3 bulk run started" in app_log
    assert "WARNING" in app_log


def test_records_below_configured_level_are_dropped(file_logging) -> None:
    get_logger("salary_app.test").debug("noisy detail")
    get_logger("salary_app.test").info("kept")

    app_log = _read_logs(file_logging, "")
    assert "noisy detail" not in app_log
    assert "kept" in app_log


def test_init_logging_is_idempotent_for_identical_options(tmp_path) -> None:
    try:
        init_logging(log_dir=tmp_path, console=False, queue=False)
        handlers = list(logging.getLogger().handlers)
        init_logging(log_dir=tmp_path, console=False, queue=False)
        assert logging.getLogger().handlers == handlers
    finally:
        shutdown_logging()
