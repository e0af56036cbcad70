"""
Monitoring and Tracing Configuration Module.

This module provides integration with Pydantic Logfire for monitoring and
tracing of the portfolio server, including:
- API endpoint tracing
- Database operation monitoring
- Outbound HTTP calls (LLM provider, newsletter provider)
- Slow query and cache event reporting
- Error tracking

When Logfire is disabled (the default) every helper only writes to the
standard logger, so callers never need to check whether tracing is on.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI

from portfolio_cms.server.core.config import settings

logger = logging.getLogger(__name__)

_logfire_ready = False


def initialize_logfire(app: FastAPI | None = None) -> bool:
    """
    Initialize Pydantic Logfire for monitoring and tracing.

    This function sets up Logfire with automatic instrumentation for:
    - SQLAlchemy database operations
    - HTTPX HTTP requests
    - FastAPI endpoints

    Args:
        app: FastAPI application instance for FastAPI instrumentation (optional).

    Returns:
        True when Logfire was configured, False otherwise.
    """
    global _logfire_ready

    if not settings.logfire_enabled:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not settings.logfire_token:
        logger.warning(
            "Logfire is enabled but LOGFIRE_TOKEN is not set. "
            "Monitoring will not work. Set LOGFIRE_TOKEN to enable Logfire."
        )
        return False

    try:
        import logfire

        logfire.configure(
            token=settings.logfire_token,
            service_name=settings.logfire_service_name,
            environment=settings.environment,
        )

        for name, instrument in (
            ("SQLAlchemy", logfire.instrument_sqlalchemy),
            ("HTTPX", logfire.instrument_httpx),
        ):
            try:
                instrument()
                logger.info(f"Logfire: {name} instrumentation enabled")
            except Exception as e:
                logger.warning(f"Failed to instrument {name}: {e}")

        if app is not None:
            try:
                logfire.instrument_fastapi(app=app)
                logger.info("Logfire: FastAPI instrumentation enabled")
            except Exception as e:
                logger.warning(f"Failed to instrument FastAPI: {e}")

        _logfire_ready = True
        logger.info(
            f"Logfire monitoring initialized: environment={settings.environment}, "
            f"service={settings.logfire_service_name}"
        )
        return True

    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
        return False


def _emit(level: str, message: str, **attributes: Any) -> None:
    if not _logfire_ready:
        return
    try:
        import logfire

        getattr(logfire, level)(message, **attributes)
    except Exception:
        logger.debug(f"Could not send event to Logfire: {message}")


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Log an API request with performance metrics.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
    """
    logger.debug(f"{method} {path} -> {status_code} ({duration_ms:.2f}ms)")
    _emit(
        "info",
        "API request completed",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=duration_ms,
    )


def log_slow_query(query_name: str, duration_ms: float, threshold_ms: float) -> None:
    """
    Report a database query that exceeded the slow-query threshold.

    Args:
        query_name: Logical name of the query
        duration_ms: Execution time in milliseconds
        threshold_ms: Configured threshold in milliseconds
    """
    _emit("warn", "Slow query", query_name=query_name, duration_ms=duration_ms, threshold_ms=threshold_ms)


def log_llm_call(model: str, tokens_used: Optional[int], duration_ms: float) -> None:
    """
    Log a chatbot LLM call with usage metrics.

    Args:
        model: The model name
        tokens_used: Total tokens reported by the provider, if any
        duration_ms: Call duration in milliseconds
    """
    logger.info(f"LLM call completed: model={model}, tokens={tokens_used}, duration={duration_ms:.2f}ms")
    _emit("info", "LLM call completed", model=model, tokens_used=tokens_used, duration_ms=duration_ms)


def log_error(error_type: str, error_message: str, context: Optional[dict] = None) -> None:
    """
    Log an error with context for debugging.

    Args:
        error_type: Type of error
        error_message: Error message
        context: Additional context dictionary
    """
    _emit("error", f"{error_type}: {error_message}", **(context or {}))
