"""Tests for logging setup and credential masking."""

import logging

import pytest

from common.logging_config import SensitiveDataFilter, setup_logging


def make_record(msg, args=None):
    return logging.LogRecord("gateway", logging.INFO, __file__, 1, msg, args, None)


@pytest.mark.parametrize("message,secret", [
    ("password=hunter2", "hunter2"),
    ('{"password": "hunter2"}', "hunter2"),
    ("Authorization: Basic YWRtaW46czNjcmV0", "YWRtaW46czNjcmV0"),
    ("AUTH=admin:s3cret", "admin:s3cret"),
])
def test_filter_masks_credentials(message, secret):
    record = make_record(message)

    assert SensitiveDataFilter().filter(record) is True
    assert secret not in record.getMessage()
    assert "***MASKED***" in record.getMessage()


def test_filter_masks_args():
    record = make_record("login with %s", ("password=hunter2",))

    SensitiveDataFilter().filter(record)

    assert "hunter2" not in record.getMessage()


def test_filter_leaves_plain_messages():
    record = make_record("Upload committed: report_1.pdf (10 chunks, 4096 bytes)")

    SensitiveDataFilter().filter(record)

    assert record.getMessage() == "Upload committed: report_1.pdf (10 chunks, 4096 bytes)"


def test_setup_logging_installs_single_handler():
    logger = setup_logging("test-component", log_level="DEBUG")
    again = setup_logging("test-component", log_level="WARNING")

    assert logger is again
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING
    assert logger.propagate is False
    assert any(isinstance(f, SensitiveDataFilter) for f in logger.handlers[0].filters)
