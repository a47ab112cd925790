"""Tests for error mapping and the unsupported-parameter detector."""

import httpx
import pytest

from chatbridge_sdk.providers.base import ConfigurationError, ProviderError
from chatbridge_sdk.providers.errors import ErrorMapper
from tests.helpers.mock_exceptions import (
    AuthenticationError,
    MockBadRequestError,
    MockInternalServerError,
    MockRateLimitError,
    MockUnsupportedParameterError,
    RateLimitError,
)


class TestUnsupportedParameter:

    def test_structured_body(self):
        assert ErrorMapper.unsupported_parameter(MockUnsupportedParameterError("top_p")) == "top_p"

    def test_structured_attributes(self):
        error = Exception("bad")
        error.code = "unsupported_value"
        error.param = "reasoning_effort"
        assert ErrorMapper.unsupported_parameter(error) == "reasoning_effort"

    def test_message_form(self):
        error = MockBadRequestError("Unsupported value: 'temperature' does not support 0.2 with this model.")
        assert ErrorMapper.unsupported_parameter(error) == "temperature"

    def test_two_fields_named(self):
        error = MockBadRequestError("Unsupported parameter: 'top_p'. Unsupported parameter: 'stop'.")
        assert ErrorMapper.unsupported_parameter(error) is None

    def test_other_code_ignored(self):
        error = MockBadRequestError("bad", body={"error": {"code": "invalid_type", "param": "messages"}})
        assert ErrorMapper.unsupported_parameter(error) is None

    def test_unrelated_error(self):
        assert ErrorMapper.unsupported_parameter(ValueError("nope")) is None


class TestOpenAIMapping:

    def test_passes_own_errors_through(self):
        error = ConfigurationError("bad config")
        assert ErrorMapper.map_openai_error(error) is error

    def test_server_error(self):
        mapped = ErrorMapper.map_openai_error(MockInternalServerError(status_code=502))
        assert mapped.status_code == 502
        assert mapped.is_retryable is True
        assert mapped.message.startswith("OpenAI API error")

    def test_bad_request_not_retryable(self):
        mapped = ErrorMapper.map_openai_error(MockBadRequestError())
        assert mapped.status_code == 400
        assert mapped.is_retryable is False

    def test_retry_after_header(self):
        assert ErrorMapper.map_openai_error(MockRateLimitError(retry_after=7)).retry_after == 7.0

    def test_timeout(self):
        mapped = ErrorMapper.map_openai_error(httpx.ReadTimeout("slow"))
        assert mapped.is_retryable is True
        assert mapped.status_code is None


class TestAnthropicMapping:

    def test_rate_limit(self):
        mapped = ErrorMapper.map_anthropic_error(RateLimitError())
        assert mapped.status_code == 429
        assert mapped.provider == "claude"

    def test_authentication(self):
        mapped = ErrorMapper.map_anthropic_error(AuthenticationError())
        assert mapped.status_code == 401
        assert "authentication failed" in mapped.message


class TestHTTPMapping:

    @staticmethod
    def status_error(status, **kwargs):
        request = httpx.Request("POST", "https://example.com/api")
        response = httpx.Response(status, request=request, **kwargs)
        return httpx.HTTPStatusError("error", request=request, response=response)

    def test_json_error_message(self):
        mapped = ErrorMapper.map_http_error(self.status_error(401, json={"error": {"message": "bad key"}}), "gemini")
        assert mapped.message == "gemini API error (401): bad key"
        assert mapped.status_code == 401

    def test_string_error(self):
        mapped = ErrorMapper.map_http_error(self.status_error(404, json={"error": "model missing"}), "ollama")
        assert "model missing" in mapped.message

    def test_plain_text(self):
        mapped = ErrorMapper.map_http_error(self.status_error(502, text="Bad Gateway"), "ollama")
        assert "Bad Gateway" in mapped.message
        assert mapped.is_retryable is True

    def test_timeout(self):
        mapped = ErrorMapper.map_http_error(httpx.ConnectTimeout("timed out"), "ollama")
        assert "timed out" in mapped.message
        assert mapped.is_retryable is True

    def test_generic_exception(self):
        mapped = ErrorMapper.map_http_error(KeyError("candidates"), "gemini")
        assert isinstance(mapped, ProviderError)
        assert isinstance(mapped.original_error, KeyError)


class TestErrorEvent:

    def test_code_becomes_status(self):
        mapped = ErrorMapper.map_error_event(
            {"code": 503, "message": "The model is overloaded", "status": "UNAVAILABLE"}, "gemini"
        )
        assert mapped.status_code == 503
        assert mapped.provider == "gemini"
        assert "overloaded" in mapped.message
        assert mapped.is_retryable is True

    def test_client_error_not_retryable(self):
        mapped = ErrorMapper.map_error_event({"code": 400, "message": "Invalid argument"}, "gemini")
        assert mapped.status_code == 400
        assert mapped.is_retryable is False

    def test_plain_string_error(self):
        mapped = ErrorMapper.map_error_event("rate limit reached", "ollama")
        assert mapped.status_code is None
        assert "rate limit reached" in mapped.message
        assert mapped.is_retryable is True
