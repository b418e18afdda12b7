#!/usr/bin/env python3
"""
Logging and Metrics
Structlog configuration shared by the recipe site components and the
Prometheus counters exposed on /metrics.
"""

import os
import sys
import logging
from typing import Optional, Tuple

import structlog
from structlog.stdlib import LoggerFactory
from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST


class MonitoringConfig:
    """Logging configuration from the environment."""

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # json or text
    SERVICE_NAME = os.getenv("SERVICE_NAME", "recipe-site")

config = MonitoringConfig()


# Prometheus Metrics
ERROR_COUNTER = Counter('errors_total', 'Total errors by type and severity', ['error_type', 'severity', 'component'])
RETRY_COUNTER = Counter('retries_total', 'Total retry attempts', ['operation', 'retry_reason'])
FALLBACK_USAGE = Counter('fallback_usage_total', 'Total fallback mechanism usage', ['fallback_type'])
SCALE_REQUESTS = Counter('recipe_scale_requests_total', 'Recipe renders by scale factor', ['recipe', 'scale'])


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None):
    """Configure structured logging with Structlog."""
    level = (level or config.LOG_LEVEL).upper()
    log_format = log_format or config.LOG_FORMAT

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO)
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def metrics_payload() -> Tuple[bytes, str]:
    """Prometheus exposition body and content type."""
    return generate_latest(), CONTENT_TYPE_LATEST
