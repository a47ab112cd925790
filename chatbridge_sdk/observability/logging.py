"""
Structured logging for provider adapters.

Every record is prefixed with ``[provider=... key=value ...]`` so logs from
different backends can be filtered and compared the same way.
"""

import logging
import time
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Optional

from ..models.usage import TokenUsage


class ProviderLogger:
    """Structured logger bound to one provider id."""

    def __init__(self, provider_name: str):
        self.provider = provider_name
        self.logger = logging.getLogger(f"chatbridge_sdk.providers.{provider_name}")

    def _format_message(self, message: str, **fields: Any) -> str:
        parts = [f"provider={self.provider}"]
        parts.extend(f"{key}={value}" for key, value in fields.items() if value is not None)
        return f"[{' '.join(parts)}] {message}"

    def _log(self, level: int, message: str, model: Optional[str], request_id: Optional[str], **fields: Any):
        if self.logger.isEnabledFor(level):
            self.logger.log(level, self._format_message(message, model=model, request_id=request_id, **fields))

    def debug(self, message: str, model: Optional[str] = None, request_id: Optional[str] = None, **fields):
        self._log(logging.DEBUG, message, model, request_id, **fields)

    def info(self, message: str, model: Optional[str] = None, request_id: Optional[str] = None, **fields):
        self._log(logging.INFO, message, model, request_id, **fields)

    def warning(self, message: str, model: Optional[str] = None, request_id: Optional[str] = None, **fields):
        self._log(logging.WARNING, message, model, request_id, **fields)

    def error(self, message: str, model: Optional[str] = None, request_id: Optional[str] = None,
              error: Optional[BaseException] = None, **fields):
        if error is not None:
            fields['error_type'] = type(error).__name__
            fields['error_msg'] = str(error)
        self._log(logging.ERROR, message, model, request_id, **fields)

    @contextmanager
    def track_request(self, method: str, model: Optional[str], request_id: Optional[str] = None):
        """
        Time one adapter call and log its outcome.

        Yields a dict carrying the ``request_id`` so nested log lines can be
        correlated. Exceptions are logged and re-raised unchanged.
        """
        request_id = request_id or uuid.uuid4().hex[:8]
        start_time = time.monotonic()
        self.debug(f"Starting {method} request", model=model, request_id=request_id)

        try:
            yield {'request_id': request_id, 'model': model, 'method': method}
        except Exception as e:
            self.error(
                f"Failed {method} request",
                model=model,
                request_id=request_id,
                duration_ms=int((time.monotonic() - start_time) * 1000),
                error=e,
            )
            raise

        self.info(
            f"Completed {method} request",
            model=model,
            request_id=request_id,
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )

    def log_usage(self, usage: TokenUsage, model: Optional[str], request_id: str):
        self.info(
            "Token usage",
            model=model,
            request_id=request_id,
            prompt_tokens=usage.prompt_tokens,
            completion_tokens=usage.completion_tokens,
            total_tokens=usage.total_tokens,
            reasoning_tokens=usage.reasoning_tokens,
        )

    def log_streaming_metrics(self, metrics: Dict[str, Any], model: Optional[str], request_id: str):
        """Log the counters collected by a StreamAdapter, whether or not the stream finished."""
        self.debug(
            "Streaming metrics",
            model=model,
            request_id=request_id,
            chunks=metrics['chunks'],
            total_chars=metrics['total_chars'],
            duration_ms=int(metrics['duration_seconds'] * 1000),
        )
