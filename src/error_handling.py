#!/usr/bin/env python3
"""
Error Handling and Retry Mechanisms
Typed errors for the recipe site, retries with backoff for remote content,
fallback strategies, and Flask error handlers.
"""

import os
import uuid
import logging
from datetime import datetime
from enum import Enum
from functools import wraps
from typing import Any, Callable, Dict, List, Tuple, Type

import requests
import structlog
from flask import Flask, jsonify, render_template, request
from tenacity import (
    retry, stop_after_attempt, wait_exponential, wait_fixed, wait_incrementing,
    wait_none, retry_if_exception_type, before_sleep_log
)
from werkzeug.exceptions import HTTPException

from monitoring_logging import ERROR_COUNTER, RETRY_COUNTER, FALLBACK_USAGE

logger = structlog.get_logger(__name__)


class ErrorHandlingConfig:
    """Configuration for error handling system."""

    MAX_RETRIES = int(os.getenv("MAX_RETRIES", "3"))
    RETRY_BASE_DELAY = float(os.getenv("RETRY_BASE_DELAY", "0.5"))  # seconds
    RETRY_MAX_DELAY = float(os.getenv("RETRY_MAX_DELAY", "10.0"))  # seconds
    RETRY_MULTIPLIER = float(os.getenv("RETRY_MULTIPLIER", "2.0"))

config = ErrorHandlingConfig()


class ErrorSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class ErrorCategory(Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    EXTERNAL_CONTENT = "external_content"
    UNKNOWN = "unknown"

class RetryStrategy(Enum):
    EXPONENTIAL_BACKOFF = "exponential_backoff"
    FIXED_DELAY = "fixed_delay"
    LINEAR_BACKOFF = "linear_backoff"
    IMMEDIATE = "immediate"


# Custom Exceptions
class RecipeSiteError(Exception):
    """Base exception for recipe site errors."""

    status_code = 500

    def __init__(self, message: str, error_code: str = None, details: Dict[str, Any] = None,
                 severity: ErrorSeverity = ErrorSeverity.MEDIUM, category: ErrorCategory = ErrorCategory.UNKNOWN):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.severity = severity
        self.category = category
        self.timestamp = datetime.utcnow()
        self.trace_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.error_code,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "trace_id": self.trace_id,
            "timestamp": self.timestamp.isoformat(),
            "details": self.details,
        }

class ValidationError(RecipeSiteError):
    """Invalid recipe data or request parameters."""

    status_code = 400

    def __init__(self, message: str, validation_errors: List[str] = None, **kwargs):
        kwargs.setdefault("severity", ErrorSeverity.LOW)
        super().__init__(message, category=ErrorCategory.VALIDATION, **kwargs)
        self.validation_errors = validation_errors or []
        if self.validation_errors:
            self.details.setdefault("validation_errors", self.validation_errors)

class InvalidScaleError(ValidationError):
    """Scale factor is not a finite positive number."""

    def __init__(self, value: Any, **kwargs):
        super().__init__(f"Invalid scale factor: {value!r}", details={"scale": str(value)}, **kwargs)
        self.value = value

class RecipeNotFoundError(RecipeSiteError):
    """No recipe with the requested slug."""

    status_code = 404

    def __init__(self, slug: str, **kwargs):
        super().__init__(f"Recipe not found: {slug}", category=ErrorCategory.NOT_FOUND,
                         severity=ErrorSeverity.LOW, details={"slug": slug}, **kwargs)
        self.slug = slug

class ContentFetchError(RecipeSiteError):
    """Remote or on-disk content could not be read."""

    status_code = 502

    def __init__(self, message: str, source: str = None, status_code: int = None, **kwargs):
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message, category=ErrorCategory.EXTERNAL_CONTENT, **kwargs)
        self.source = source
        self.http_status = status_code
        if source is not None:
            self.details.setdefault("source", source)
        if status_code is not None:
            self.details.setdefault("http_status", status_code)


# Retry Decorators
def _wait_strategy(strategy: RetryStrategy, base_delay: float, max_delay: float, multiplier: float):
    if strategy == RetryStrategy.EXPONENTIAL_BACKOFF:
        return wait_exponential(multiplier=base_delay, exp_base=multiplier, max=max_delay)
    if strategy == RetryStrategy.LINEAR_BACKOFF:
        return wait_incrementing(start=base_delay, increment=base_delay, max=max_delay)
    if strategy == RetryStrategy.FIXED_DELAY:
        return wait_fixed(base_delay)
    return wait_none()


def retry_with_backoff(
    max_attempts: int = None,
    strategy: RetryStrategy = RetryStrategy.EXPONENTIAL_BACKOFF,
    base_delay: float = None,
    max_delay: float = None,
    multiplier: float = None,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
):
    """
    Decorator for retry with configurable backoff strategy.

    The last exception is re-raised once all attempts are used up.
    """
    max_attempts = config.MAX_RETRIES if max_attempts is None else max_attempts
    base_delay = config.RETRY_BASE_DELAY if base_delay is None else base_delay
    max_delay = config.RETRY_MAX_DELAY if max_delay is None else max_delay
    multiplier = config.RETRY_MULTIPLIER if multiplier is None else multiplier

    def decorator(func: Callable) -> Callable:
        def count_retry(retry_state):
            exception = retry_state.outcome.exception()
            RETRY_COUNTER.labels(
                operation=func.__name__,
                retry_reason=type(exception).__name__
            ).inc()

        def before_sleep(retry_state):
            count_retry(retry_state)
            before_sleep_log(logging.getLogger(__name__), logging.WARNING)(retry_state)

        return retry(
            stop=stop_after_attempt(max(1, max_attempts)),
            wait=_wait_strategy(strategy, base_delay, max_delay, multiplier),
            retry=retry_if_exception_type(exceptions),
            before_sleep=before_sleep,
            reraise=True,
        )(func)

    return decorator


# Fallback Strategies
class FallbackManager:
    """Manages fallback strategies for failed operations."""

    def __init__(self):
        self.fallback_strategies = {}

    def register_fallback(self, operation: str, fallback_func: Callable):
        """Register a fallback function for an operation."""
        self.fallback_strategies[operation] = fallback_func

    def execute_with_fallback(self, operation: str, primary_func: Callable,
                              *args, **kwargs) -> Any:
        """Execute function, switching to the registered fallback on failure."""
        try:
            return primary_func(*args, **kwargs)
        except Exception as e:
            if operation not in self.fallback_strategies:
                logger.error(f"No fallback registered for {operation}")
                raise

            logger.warning(f"Primary function failed for {operation}, using fallback",
                           error=str(e), error_type=type(e).__name__)
            FALLBACK_USAGE.labels(fallback_type=operation).inc()
            return self.fallback_strategies[operation](*args, **kwargs)


def handle_known_errors(func: Callable) -> Callable:
    """Decorator to convert known exceptions to recipe site errors."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RecipeSiteError:
            raise
        except FileNotFoundError as e:
            raise ContentFetchError(f"File not found: {e}", source=e.filename) from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise ContentFetchError(f"HTTP error: {e}", status_code=status) from e
        except (ConnectionError, requests.RequestException) as e:
            raise ContentFetchError(f"Connection failed: {e}") from e
        except ValueError as e:
            raise ValidationError(f"Invalid value: {e}") from e
        except Exception as e:
            logger.warning(f"Unknown error type in {func.__name__}: {type(e).__name__}", error=str(e))
            raise

    return wrapper


# Flask Error Handlers
class APIErrorHandler:
    """Centralized error handling for the web interface."""

    @staticmethod
    def _wants_json() -> bool:
        return request.path.startswith('/api/')

    @staticmethod
    def recipe_site_error_handler(exc: RecipeSiteError):
        """Handle typed recipe site errors."""
        ERROR_COUNTER.labels(
            error_type=exc.error_code,
            severity=exc.severity.value,
            component="web"
        ).inc()
        logger.info("Request failed", error_code=exc.error_code, path=request.path,
                    trace_id=exc.trace_id)

        if APIErrorHandler._wants_json():
            return jsonify({"error": exc.to_dict()}), exc.status_code
        return render_template('error.html', status=exc.status_code, message=exc.message), exc.status_code

    @staticmethod
    def http_error_handler(exc: HTTPException):
        """Handle werkzeug HTTP errors (unknown routes, bad methods)."""
        if APIErrorHandler._wants_json():
            return jsonify({"error": {"code": exc.name, "message": exc.description}}), exc.code
        return render_template('error.html', status=exc.code, message=exc.name), exc.code

    @staticmethod
    def general_exception_handler(exc: Exception):
        """Handle unexpected exceptions."""
        error_id = str(uuid.uuid4())
        ERROR_COUNTER.labels(error_type=type(exc).__name__, severity=ErrorSeverity.HIGH.value, component="web").inc()
        logger.error(
            f"Unhandled exception: {type(exc).__name__}",
            error_id=error_id,
            error=str(exc),
            path=request.path,
            method=request.method,
            exc_info=exc,
        )

        if APIErrorHandler._wants_json():
            return jsonify({
                "error": {
                    "code": "INTERNAL_SERVER_ERROR",
                    "message": "An unexpected error occurred",
                    "error_id": error_id
                }
            }), 500
        return render_template('error.html', status=500, message="Something went wrong"), 500

    @classmethod
    def register(cls, app: Flask):
        app.register_error_handler(RecipeSiteError, cls.recipe_site_error_handler)
        app.register_error_handler(HTTPException, cls.http_error_handler)
        app.register_error_handler(Exception, cls.general_exception_handler)
