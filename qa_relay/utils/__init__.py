"""
Utility modules for the QA relay.
"""

from qa_relay.utils.logging import (
    ContextLoggerAdapter,
    JSONFormatter,
    get_logger,
    log_api_call,
    log_error_with_context,
    log_slack_event,
    setup_logging,
)

__all__ = [
    "ContextLoggerAdapter",
    "JSONFormatter",
    "get_logger",
    "setup_logging",
    "log_slack_event",
    "log_api_call",
    "log_error_with_context",
]
