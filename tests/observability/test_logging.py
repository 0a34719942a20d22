"""
Tests for correlation IDs and logging helpers.

System role: Verification of observability utilities
"""

import logging

from pdf_rag.observability import (
    CorrelationIdFilter,
    clear_correlation_id,
    configure_logging,
    correlation_scope,
    get_correlation_id,
    set_correlation_id,
)
from pdf_rag.observability.log_utils import log_exception_with_context, safe_log_value


class TestCorrelationId:
    """Test correlation ID context handling."""

    def test_set_and_clear(self) -> None:
        """Should set a given ID and clear it back to empty."""
        assert set_correlation_id("abc") == "abc"
        assert get_correlation_id() == "abc"
        clear_correlation_id()
        assert get_correlation_id() == ""

    def test_generated_when_missing(self) -> None:
        """Should generate an ID when none is given."""
        value = set_correlation_id()
        assert value and get_correlation_id() == value
        clear_correlation_id()

    def test_scope_restores_previous(self) -> None:
        """Should restore the outer ID when the scope exits."""
        set_correlation_id("outer")
        with correlation_scope("doc-1") as bound:
            assert bound == "doc-1"
            assert get_correlation_id() == "doc-1"
        assert get_correlation_id() == "outer"
        clear_correlation_id()


class TestLoggingHelpers:
    """Test log formatting helpers."""

    def test_filter_injects_correlation_id(self) -> None:
        """Should attach the current ID, or '-' when unset."""
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        CorrelationIdFilter().filter(record)
        assert record.correlation_id == "-"

        with correlation_scope("doc-9"):
            CorrelationIdFilter().filter(record)
        assert record.correlation_id == "doc-9"

    def test_safe_log_value_truncates(self) -> None:
        """Should truncate long strings and summarise collections."""
        assert safe_log_value("a" * 300, max_length=10).startswith("a" * 10 + "...")
        assert safe_log_value([1, 2, 3]) == "list(3 items)"
        assert safe_log_value({"a": 1}) == "dict(1 keys)"
        assert safe_log_value(None) == "None"

    def test_log_exception_with_context(self, caplog) -> None:
        """Should log at ERROR with error type and context."""
        logger = logging.getLogger("pdf_rag.test")
        with caplog.at_level(logging.ERROR, logger="pdf_rag.test"):
            log_exception_with_context(logger, "failed", ValueError("bad"), document_id="doc-1")

        [record] = caplog.records
        assert record.levelno == logging.ERROR
        assert record.error_type == "ValueError"
        assert record.document_id == "doc-1"

    def test_configure_logging_installs_single_handler(self) -> None:
        """Should replace root handlers with one correlation-aware handler."""
        root = logging.getLogger()
        saved = root.handlers[:]
        saved_level = root.level
        try:
            configure_logging("warning")
            configure_logging("warning")
            handlers = root.handlers
            assert len(handlers) == 1
            assert any(isinstance(f, CorrelationIdFilter) for f in handlers[0].filters)
            assert root.level == logging.WARNING
        finally:
            root.handlers = saved
            root.setLevel(saved_level)
