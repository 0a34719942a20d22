"""
Observability module.

Provides structured logging and correlation ID tracking.
"""

from pdf_rag.observability.correlation import (
    clear_correlation_id,
    correlation_scope,
    get_correlation_id,
    set_correlation_id,
)
from pdf_rag.observability.logger import CorrelationIdFilter, configure_logging, get_logger

__all__ = [
    "CorrelationIdFilter",
    "clear_correlation_id",
    "configure_logging",
    "correlation_scope",
    "get_correlation_id",
    "get_logger",
    "set_correlation_id",
]
