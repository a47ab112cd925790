"""
Error mapping utilities for provider adapters.

This module provides consistent error mapping across all providers,
converting SDK- and transport-specific errors to ProviderError instances
that keep the upstream status and the original cause.
"""

import re
from typing import Any, Optional

import httpx

from ..config.constants import UNSUPPORTED_PARAMETER_CODES
from .base import ChatBridgeError, ProviderError

_UNSUPPORTED_PARAMETER_PATTERN = re.compile(
    r"Unsupported (?:parameter|value):\s*'([A-Za-z0-9_.]+)'", re.IGNORECASE
)


class ErrorMapper:
    """Maps provider-specific errors to standardized ProviderError."""

    # Common HTTP status codes that indicate retryable errors
    RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

    RATE_LIMIT_PHRASES = ('rate limit', 'too many requests', 'quota exceeded', 'too_many_requests')

    @staticmethod
    def get_status_code(error: Exception) -> Optional[int]:
        status_code = getattr(error, 'status_code', None)
        if isinstance(status_code, int):
            return status_code
        response = getattr(error, 'response', None)
        status_code = getattr(response, 'status_code', None)
        if isinstance(status_code, int):
            return status_code
        return None

    @staticmethod
    def is_retryable(error: Exception) -> bool:
        """
        Determine if an error is retryable.

        Informational only: the SDK never retries on its own.
        """
        status_code = ErrorMapper.get_status_code(error)
        if status_code in ErrorMapper.RETRYABLE_STATUS_CODES:
            return True

        if isinstance(error, (httpx.TimeoutException, httpx.ConnectError)):
            return True

        error_msg = str(error).lower()
        return any(phrase in error_msg for phrase in ErrorMapper.RATE_LIMIT_PHRASES)

    @staticmethod
    def get_retry_after(error: Exception) -> Optional[float]:
        """
        Extract retry-after value from error if available.

        Returns:
            Optional[float]: Seconds to wait before retry, or None
        """
        response = getattr(error, 'response', None)
        headers = getattr(response, 'headers', None)
        if headers is not None:
            retry_after = headers.get('Retry-After') or headers.get('retry-after')
            if retry_after:
                try:
                    return float(retry_after)
                except (TypeError, ValueError):
                    pass

        retry_after = getattr(error, 'retry_after', None)
        if isinstance(retry_after, (int, float)):
            return float(retry_after)
        return None

    @staticmethod
    def unsupported_parameter(error: Exception) -> Optional[str]:
        """
        Name of the single request field an upstream rejected, if any.

        Recognizes the structured form (``code`` of unsupported_value or
        unsupported_parameter with a string ``param``, either on the exception
        or in its JSON body) and the plain message form
        ``Unsupported parameter: 'temperature'``.
        """
        code = getattr(error, 'code', None)
        param = getattr(error, 'param', None)

        body = getattr(error, 'body', None)
        if isinstance(body, dict):
            details = body.get('error') if isinstance(body.get('error'), dict) else body
            code = code or details.get('code')
            param = param or details.get('param')

        if code in UNSUPPORTED_PARAMETER_CODES and isinstance(param, str) and param:
            return param

        message = getattr(error, 'message', None) or str(error)
        matches = _UNSUPPORTED_PARAMETER_PATTERN.findall(str(message))
        if len(set(matches)) == 1:
            return matches[0]
        return None

    @staticmethod
    def _message(prefix: str, error: Exception) -> str:
        detail = getattr(error, 'message', None) or str(error) or type(error).__name__
        return f"{prefix}: {detail}"

    @staticmethod
    def _wrap(message: str, provider: str, error: Exception, status_code: Optional[int] = None) -> ProviderError:
        provider_error = ProviderError(
            message=message,
            provider=provider,
            status_code=status_code if status_code is not None else ErrorMapper.get_status_code(error),
            retry_after=ErrorMapper.get_retry_after(error),
            original_error=error,
        )
        provider_error.is_retryable = ErrorMapper.is_retryable(error)
        return provider_error

    @staticmethod
    def map_openai_error(error: Exception, provider: str = "openai") -> ChatBridgeError:
        """
        Map OpenAI SDK errors (also used for OpenAI-compatible upstreams).

        Errors that are already ChatBridgeError pass through untouched.
        """
        if isinstance(error, ChatBridgeError):
            return error
        label = "xAI" if provider == "xai" else "OpenAI"
        return ErrorMapper._wrap(ErrorMapper._message(f"{label} API error", error), provider, error)

    @staticmethod
    def map_anthropic_error(error: Exception, provider: str = "claude") -> ChatBridgeError:
        """Map Anthropic SDK errors to ProviderError."""
        if isinstance(error, ChatBridgeError):
            return error

        status_code = None
        error_type = type(error).__name__
        if error_type == 'RateLimitError':
            message = f"Anthropic rate limit exceeded: {error}"
            status_code = 429
        elif error_type == 'AuthenticationError':
            message = f"Anthropic authentication failed: {error}"
            status_code = 401
        else:
            message = ErrorMapper._message("Anthropic API error", error)
        return ErrorMapper._wrap(message, provider, error, status_code)

    @staticmethod
    def map_http_error(error: Exception, provider: str) -> ChatBridgeError:
        """Map httpx transport and status errors for the raw-HTTP adapters."""
        if isinstance(error, ChatBridgeError):
            return error

        if isinstance(error, httpx.HTTPStatusError):
            detail = ErrorMapper.extract_error_detail(error.response)
            message = f"{provider} API error ({error.response.status_code}): {detail}"
            return ErrorMapper._wrap(message, provider, error, error.response.status_code)
        if isinstance(error, httpx.TimeoutException):
            return ErrorMapper._wrap(f"{provider} request timed out: {error}", provider, error)
        if isinstance(error, httpx.TransportError):
            return ErrorMapper._wrap(f"{provider} connection error: {error}", provider, error)
        return ErrorMapper._wrap(ErrorMapper._message(f"{provider} API error", error), provider, error)

    @staticmethod
    def extract_error_detail(response: httpx.Response) -> str:
        """Best-effort error text from an upstream error body."""
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict):
            error = body.get('error')
            if isinstance(error, dict):
                return str(error.get('message') or error)
            if error:
                return str(error)
            if body.get('message'):
                return str(body['message'])
        return str(body)

    @staticmethod
    def map_error_event(error: Any, provider: str) -> ProviderError:
        """
        Map an ``{"error": ...}`` object delivered in a 200 body or a stream event.

        The upstream ``code`` becomes the status code, so retryability follows
        the same rules as an HTTP status error.
        """
        details = error if isinstance(error, dict) else {'message': error}
        code = details.get('code')
        status_code = code if isinstance(code, int) else None
        detail = details.get('message') or details.get('status') or str(error)

        prefix = f"{provider} API error ({status_code})" if status_code else f"{provider} API error"
        provider_error = ProviderError(f"{prefix}: {detail}", provider=provider, status_code=status_code)
        provider_error.is_retryable = (
            status_code in ErrorMapper.RETRYABLE_STATUS_CODES
            or any(phrase in str(detail).lower() for phrase in ErrorMapper.RATE_LIMIT_PHRASES)
        )
        return provider_error
