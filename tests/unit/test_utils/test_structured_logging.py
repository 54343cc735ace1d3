"""Tests for logging utilities and the error taxonomy."""

import logging
import pytest
from unittest.mock import MagicMock, patch

from property_wizard.utils.errors import (
    LoadError,
    ListingNotFoundError,
    PropertyNotFoundError,
    SubmissionError,
    WizardError,
)
from property_wizard.utils.logging import (
    correlation_context,
    get_correlation_id,
    get_structured_logger,
    log_timing,
    mask_sensitive_data,
    mask_user_id,
)
from property_wizard.utils.logging_config import LoggingConfig


@pytest.mark.unit
def test_correlation_context_nests_and_restores():
    assert get_correlation_id() is None

    with correlation_context() as outer:
        assert outer.startswith("wiz_")
        with correlation_context("inner-id") as inner:
            assert inner == "inner-id"
            assert get_correlation_id() == "inner-id"
        assert get_correlation_id() == outer

    assert get_correlation_id() is None


@pytest.mark.unit
def test_structured_logger_adds_correlation_id():
    mock_logger = MagicMock()
    logger = get_structured_logger("test")
    logger.logger = mock_logger

    with correlation_context("corr-1"):
        logger.info("Saved", collection="units")

    extra = mock_logger.info.call_args.kwargs["extra"]
    assert extra["correlation_id"] == "corr-1"
    assert extra["collection"] == "units"
    assert "timestamp" in extra


@pytest.mark.unit
def test_mask_sensitive_data():
    masked = mask_sensitive_data("Reach ada@example.com or 555-123-4567")

    assert "ada@example.com" not in masked
    assert "[REDACTED_EMAIL]" in masked


@pytest.mark.unit
def test_mask_user_id():
    long_id = "3f1c2a9e-8d7b-4c6a-9f00-123456789abc"

    assert mask_user_id(long_id).startswith("3f1c...")
    assert mask_user_id("short") == "short"
    assert mask_user_id(None) is None


@pytest.mark.unit
def test_log_timing_reports_slow_operation():
    logger = MagicMock()

    with patch.object(LoggingConfig, "LOG_SLOW_OPERATION_THRESHOLD_MS", -1):
        with log_timing("create_record", logger=logger, collection="units"):
            pass

    assert logger.info.call_args.kwargs["operation"] == "create_record"
    assert logger.warning.called


@pytest.mark.unit
def test_setup_logging_installs_single_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level

    try:
        LoggingConfig.setup_logging()
        LoggingConfig.setup_logging()

        assert len(root.handlers) == 1
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


@pytest.mark.unit
def test_error_hierarchy():
    assert issubclass(PropertyNotFoundError, LoadError)
    assert issubclass(ListingNotFoundError, LoadError)
    assert issubclass(LoadError, WizardError)
    assert str(PropertyNotFoundError("prop_1")) == "Property not found: prop_1"
    assert SubmissionError("failed").created == {}
