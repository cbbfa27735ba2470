"""
Structured event logging.

Features:
- JSON formatted log records
- Correlation / request ID tracking via context variables
- Performance events
- Error tracking with stack traces

Records are rendered as JSON and handed to loguru, so the sinks configured in
``layoutforge.core.logger`` decide where they end up.
"""
import json
import traceback
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from contextvars import ContextVar
from functools import wraps
import socket

from loguru import logger as loguru_logger
from layoutforge.config import settings

# Context variables for correlation tracking
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
screen_name_var: ContextVar[Optional[str]] = ContextVar('screen_name', default=None)


class StructuredLogger:
    """
    Structured logger with correlation tracking.

    Every record carries:
    - Timestamp (ISO 8601)
    - Correlation ID (traces an entire HTTP request)
    - Request ID (one pipeline execution)
    - Screen name being generated
    - Service metadata
    """

    def __init__(self, name: str):
        self.name = name
        self.hostname = socket.gethostname()
        self.service_name = settings.app_name
        self.service_version = settings.app_version
        self.environment = settings.environment

    def _get_base_context(self) -> Dict[str, Any]:
        """Get base logging context"""
        return {
            "@timestamp": datetime.now(timezone.utc).isoformat(),
            "service": {
                "name": self.service_name,
                "version": self.service_version,
                "environment": self.environment,
                "hostname": self.hostname
            },
            "logger": {
                "name": self.name
            },
            "correlation": {
                "correlation_id": correlation_id_var.get(),
                "request_id": request_id_var.get(),
                "screen_name": screen_name_var.get()
            }
        }

    def _format_log(
        self,
        level: str,
        event: str,
        message: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> Dict[str, Any]:
        """Format log entry as a JSON-serialisable dict"""

        log_entry = self._get_base_context()

        log_entry.update({
            "level": level.upper(),
            "event": event,
            "message": message or event
        })

        if extra:
            log_entry["data"] = extra

        if exc_info:
            log_entry["error"] = {
                "type": type(exc_info).__name__,
                "message": str(exc_info),
                "stacktrace": "".join(
                    traceback.format_exception(type(exc_info), exc_info, exc_info.__traceback__)
                )
            }

        return log_entry

    def _emit(self, level: str, log_entry: Dict[str, Any]) -> None:
        loguru_logger.opt(depth=2).log(level, json.dumps(log_entry, default=str))

    def debug(self, event: str, message: str = None, extra: Dict = None, **kwargs):
        """Log debug message"""
        self._emit("DEBUG", self._format_log("DEBUG", event, message, extra))

    def info(self, event: str, message: str = None, extra: Dict = None, **kwargs):
        """Log info message"""
        self._emit("INFO", self._format_log("INFO", event, message, extra))

    def warning(
        self,
        event: str,
        message: str = None,
        extra: Dict = None,
        exc_info: BaseException = None,
        **kwargs
    ):
        """Log warning message"""
        self._emit("WARNING", self._format_log("WARNING", event, message, extra, exc_info))

    def error(
        self,
        event: str,
        message: str = None,
        extra: Dict = None,
        exc_info: BaseException = None,
        **kwargs
    ):
        """Log error message"""
        self._emit("ERROR", self._format_log("ERROR", event, message, extra, exc_info))

    def critical(
        self,
        event: str,
        message: str = None,
        extra: Dict = None,
        exc_info: BaseException = None,
        **kwargs
    ):
        """Log critical message"""
        self._emit("CRITICAL", self._format_log("CRITICAL", event, message, extra, exc_info))

    def performance(
        self,
        event: str,
        duration_ms: float,
        extra: Dict = None
    ):
        """Log performance metric"""
        perf_data = {
            "performance": {
                "duration_ms": duration_ms,
                "duration_seconds": duration_ms / 1000
            }
        }

        if extra:
            perf_data.update(extra)

        log_entry = self._format_log("INFO", event, f"Performance: {duration_ms:.1f}ms", perf_data)
        self._emit("INFO", log_entry)


def get_logger(name: str) -> StructuredLogger:
    """
    Get structured logger for module.

    Usage:
        logger = get_logger(__name__)
        logger.info("ir.conversion.completed", extra={"components": 3})
    """
    return StructuredLogger(name)


class log_context:
    """
    Context manager for correlation tracking.

    Usage:
        with log_context(correlation_id="abc", request_id="123"):
            logger.info("pipeline.execution.started")

    Unknown keyword arguments are accepted and ignored so call sites can
    describe the operation (``operation="startup"``).
    """

    def __init__(
        self,
        correlation_id: str = None,
        request_id: str = None,
        screen_name: str = None,
        **kwargs
    ):
        self.correlation_id = correlation_id
        self.request_id = request_id
        self.screen_name = screen_name
        self.extra_context = kwargs

        self._tokens = []

    def __enter__(self):
        """Set context variables"""
        if self.correlation_id:
            self._tokens.append((correlation_id_var, correlation_id_var.set(self.correlation_id)))
        if self.request_id:
            self._tokens.append((request_id_var, request_id_var.set(self.request_id)))
        if self.screen_name:
            self._tokens.append((screen_name_var, screen_name_var.set(self.screen_name)))

        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Restore previous context"""
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens = []


def trace_async(event_prefix: str):
    """
    Decorator for tracing async functions.

    Usage:
        @trace_async("backend.call")
        async def call_backend(prompt: str):
            ...
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)

            start_time = datetime.now(timezone.utc)

            logger.debug(
                f"{event_prefix}.started",
                extra={"function": func.__name__}
            )

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                duration_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000

                logger.error(
                    f"{event_prefix}.failed",
                    extra={
                        "function": func.__name__,
                        "duration_ms": duration_ms,
                        "error_type": type(e).__name__
                    },
                    exc_info=e
                )
                raise

            duration_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
            logger.performance(
                f"{event_prefix}.completed",
                duration_ms=duration_ms,
                extra={"function": func.__name__, "success": True}
            )
            return result

        return wrapper
    return decorator


def trace_sync(event_prefix: str):
    """
    Decorator for tracing sync functions.

    Usage:
        @trace_sync("prompt.compile")
        def compile_prompt(ir):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)

            start_time = datetime.now(timezone.utc)

            logger.debug(
                f"{event_prefix}.started",
                extra={"function": func.__name__}
            )

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000

                logger.error(
                    f"{event_prefix}.failed",
                    extra={
                        "function": func.__name__,
                        "duration_ms": duration_ms,
                        "error_type": type(e).__name__
                    },
                    exc_info=e
                )
                raise

            duration_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
            logger.performance(
                f"{event_prefix}.completed",
                duration_ms=duration_ms,
                extra={"function": func.__name__, "success": True}
            )
            return result

        return wrapper
    return decorator


"""
LOG EVENT NAMING CONVENTIONS:

Use dot notation: <domain>.<action>.<result>

Examples:
- http.request.received
- pipeline.stage.ir_conversion.completed
- pipeline.stage.code_generation.failed
- layout.validation.failed
- response.parse.artifact_missing
- backend.call.completed
"""
