from __future__ import annotations

import logging

import structlog

from swingsubmit.logging import (
    SubmissionContextFilter,
    bind_submission_context,
    clear_submission_context,
    get_logger,
)


def test_get_logger_attaches_context_filter_once() -> None:
    log = get_logger("swingsubmit.tests.filter_once")
    get_logger("swingsubmit.tests.filter_once")

    assert sum(isinstance(item, SubmissionContextFilter) for item in log.filters) == 1


def test_bound_context_lands_on_records_without_overriding_extra(caplog) -> None:
    log = get_logger("swingsubmit.tests.context")
    bind_submission_context(session_id="bound")
    try:
        with caplog.at_level(logging.INFO):
            log.info("from.context")
            log.info("from.extra", extra={"session_id": "explicit"})
    finally:
        clear_submission_context()

    context_record, extra_record = caplog.records
    assert context_record.session_id == "bound"
    assert extra_record.session_id == "explicit"
    assert "session_id" not in structlog.contextvars.get_contextvars()
