"""Shared pytest fixtures for ChatBridge SDK tests."""

import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load environment variables from .env file for tests
load_dotenv()

# Make ``tests.helpers`` importable however pytest is launched
sys.path.insert(0, str(Path(__file__).parent.parent))

from chatbridge_sdk.config.constants import MODEL_KEYWORDS_FILE_ENV_VAR, MODEL_KEYWORDS_JSON_ENV_VAR
from chatbridge_sdk.config.model_keywords import reload_model_keywords
from chatbridge_sdk.core.routing import ConfigResolver, EnvironmentConfigLoader, InMemoryUserConfigStore
from chatbridge_sdk.models.conversation_types import ChatMessage, MessageRole
from chatbridge_sdk.models.generation import GenerationConfig
from tests.helpers.streaming_mocks import make_sdk_client


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without network access")
    config.addinivalue_line("markers", "integration: tests that run the full client stack")
    config.addinivalue_line("markers", "slow: slow tests")


@pytest.fixture(autouse=True)
def no_keyword_overrides(monkeypatch):
    """Keep local model keyword overrides out of the tests."""
    monkeypatch.delenv(MODEL_KEYWORDS_JSON_ENV_VAR, raising=False)
    monkeypatch.delenv(MODEL_KEYWORDS_FILE_ENV_VAR, raising=False)
    reload_model_keywords()
    yield
    reload_model_keywords()


@pytest.fixture
def mock_env_vars():
    """Environment mapping with a credential for every keyed provider."""
    return {
        "OPENAI_API_KEY": "test-openai-key",
        "CLAUDE_API_KEY": "test-claude-key",
        "GEMINI_API_KEY": "test-gemini-key",
        "XAI_API_KEY": "test-xai-key",
    }


@pytest.fixture
def env_resolver(mock_env_vars):
    """Resolver reading only the mock environment."""
    return ConfigResolver(
        store=InMemoryUserConfigStore(),
        env_loader=EnvironmentConfigLoader(mock_env_vars),
    )


@pytest.fixture
def sample_messages():
    return [
        ChatMessage(role=MessageRole.SYSTEM, content="You are a helpful assistant."),
        ChatMessage(role=MessageRole.USER, content="What is 2+2?"),
    ]


@pytest.fixture
def conversation_messages():
    """System, user, assistant, user: exercises role mapping and ordering."""
    return [
        ChatMessage(role=MessageRole.SYSTEM, content="You are a math tutor."),
        ChatMessage(role=MessageRole.USER, content="What is 2+2?"),
        ChatMessage(role=MessageRole.ASSISTANT, content="4"),
        ChatMessage(role=MessageRole.USER, content="And 3+3?"),
    ]


@pytest.fixture
def openai_config():
    return GenerationConfig(provider="openai", api_key="test-key", model="gpt-4o")


@pytest.fixture
def sdk_client():
    """Async SDK client mock (OpenAI or Anthropic) usable as an async context manager."""
    return make_sdk_client()


@pytest.fixture
def openai_completion():
    """Chat Completions response as returned by model_dump()."""
    return {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "model": "gpt-4o-2024-08-06",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "Test response"},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


@pytest.fixture
def anthropic_message():
    """Messages API response as returned by model_dump()."""
    return {
        "id": "msg_123",
        "type": "message",
        "role": "assistant",
        "model": "claude-3-5-sonnet-20241022",
        "content": [{"type": "text", "text": "Test response"}],
        "stop_reason": "end_turn",
        "usage": {"input_tokens": 10, "output_tokens": 5},
    }
