"""
Logging configuration for the VCard Backend application.
Provides structured logging for user record storage operations.
"""

import logging
import sys
from typing import Any, Dict

import structlog
from structlog.stdlib import LoggerFactory

from app.core.config import settings


def setup_logging() -> None:
    """
    Configure structured logging for the application.
    Sets up different log formats for development and production environments.
    """

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _get_processor(),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL.upper()),
    )

    # Set specific logger levels
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _get_processor():
    """
    Get the appropriate processor based on environment.

    Returns:
        Processor function for structlog
    """
    if settings.ENVIRONMENT == "production":
        return structlog.processors.JSONRenderer()
    else:
        return structlog.dev.ConsoleRenderer(colors=True)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog.stdlib.BoundLogger: Configured logger instance
    """
    return structlog.get_logger(name)


# Specialized logging functions for record store operations

def log_record_operation(
    operation: str,
    username: str,
    backend: str = None,
    **kwargs
) -> None:
    """
    Log user record operations.

    Args:
        operation: Operation type (fetch, create, upsert, topup, withdraw)
        username: Record key
        backend: Storage backend name (file, remote_table)
        **kwargs: Additional context
    """
    logger = get_logger("record.operation")
    logger.info(
        "Record operation",
        operation=operation,
        username=username,
        backend=backend,
        **kwargs
    )


def log_storage_failure(
    backend: str,
    operation: str,
    username: str = None,
    error: Exception = None,
    **kwargs
) -> None:
    """
    Log a backend fault that was converted into a not-found or failure signal.

    Args:
        backend: Storage backend name
        operation: get, upsert or read_store
        username: Record key, when the fault concerns one record
        error: The swallowed exception
        **kwargs: Additional context
    """
    logger = get_logger("storage.failure")
    logger.warning(
        "Storage backend failure",
        backend=backend,
        operation=operation,
        username=username,
        error=str(error) if error else None,
        error_type=type(error).__name__ if error else None,
        **kwargs
    )


def log_error(error: Exception, context: Dict[str, Any] = None) -> None:
    """
    Log an unexpected error with context.

    Args:
        error: Exception instance
        context: Additional context information
    """
    logger = get_logger("error")
    logger.error(
        "An error occurred",
        error=str(error),
        error_type=type(error).__name__,
        context=context or {},
        exc_info=True
    )
