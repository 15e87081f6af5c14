"""Tests for structured log formatting."""

import logging

from interview_engine.core.logging import StructuredFormatter, log_with_context


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("interview_engine.test", logging.INFO, __file__, 1, "Interview materialized", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_context_fields_promoted(self):
        line = StructuredFormatter().format(_record(interview_id=7, extra_data={"questions": 4}))

        assert "level=INFO" in line
        assert "message=Interview materialized" in line
        assert "interview_id=7" in line
        assert line.endswith("questions=4")

    def test_plain_record(self):
        line = StructuredFormatter().format(_record())

        assert "interview_id" not in line


def test_log_with_context_splits_identifiers(caplog):
    logger = logging.getLogger("interview_engine.test_context")

    with caplog.at_level(logging.INFO, logger="interview_engine.test_context"):
        log_with_context(logger, logging.INFO, "Status changed", interview_id=3, response_id=9, status="completed")

    record = caplog.records[0]
    assert record.interview_id == 3
    assert record.response_id == 9
    assert record.extra_data == {"status": "completed"}
