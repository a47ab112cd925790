"""Main client interface for the ChatBridge SDK."""

import logging
from typing import Any, AsyncGenerator, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from ..core.routing import ConfigResolver, build_generation_config, resolve_provider
from ..core.routing.selector import ProviderId
from ..models.conversation_types import ChatMessage, MessageRole
from ..models.generation import GenerationConfig, ModelInfo, NormalizedResponse, ProviderType, StreamFragment
from ..providers.base import ConfigurationError, ProviderAdapter, UnsupportedOperationError, close_quietly
from ..providers.registry import create_default_providers
from ..thinking.registry import get_thinking_adapter, has_thinking_adapter

logger = logging.getLogger(__name__)

MessagesInput = Sequence[Union[ChatMessage, Mapping[str, Any]]]
ConfigInput = Union[GenerationConfig, Mapping[str, Any]]

# Prompt and output bound used by test_specific_model
MODEL_TEST_PROMPT = "Hi"
MODEL_TEST_MAX_TOKENS = 16


def _coerce_messages(messages: MessagesInput) -> List[ChatMessage]:
    try:
        return [m if isinstance(m, ChatMessage) else ChatMessage.model_validate(m) for m in messages]
    except ValidationError as e:
        raise ConfigurationError(f"Invalid message: {e.errors()[0]['msg']}") from e


def _coerce_config(config: ConfigInput) -> GenerationConfig:
    if isinstance(config, GenerationConfig):
        return config
    return build_generation_config(config)


class ChatBridgeClient:
    """
    Single entry point for every provider.

    Resolves the provider alias, validates the configuration before any
    network call, then dispatches to the registered adapter. The client holds
    no per-request state, so one instance can serve concurrent calls.
    """

    def __init__(
        self,
        resolver: Optional[ConfigResolver] = None,
        providers: Optional[Mapping[ProviderType, ProviderAdapter]] = None,
    ):
        """
        Initialize the client.

        Args:
            resolver: Configuration resolver (environment-only when omitted)
            providers: Adapter per provider id (all six built-in adapters when omitted)
        """
        self.resolver = resolver or ConfigResolver()
        self.providers: Dict[ProviderType, ProviderAdapter] = (
            dict(providers) if providers is not None else create_default_providers()
        )

    def _get_adapter(self, provider: ProviderType) -> ProviderAdapter:
        adapter = self.providers.get(provider)
        if adapter is None:
            raise ConfigurationError(f"No adapter registered for {provider.value}", provider=provider.value)
        return adapter

    def _prepare(self, provider: ProviderId, config: ConfigInput):
        """Resolve the adapter and validate the config. Errors raise, warnings are logged."""
        config = _coerce_config(config)
        resolved = resolve_provider(provider, config.use_responses_api or False)

        validation = self.resolver.validate_config(resolved, config)
        if not validation.valid:
            raise ConfigurationError(
                self.resolver.get_validation_error_message(resolved, validation),
                provider=resolved.value,
                errors=validation.errors,
            )
        for warning in validation.warnings:
            logger.warning("[%s] %s", resolved.value, warning)
        self._log_reasoning_warnings(resolved, config)

        return self._get_adapter(resolved), config

    def _log_reasoning_warnings(self, provider: ProviderType, config: GenerationConfig) -> None:
        if not has_thinking_adapter(provider):
            return
        thinking_adapter = get_thinking_adapter(provider)
        if not (config.enable_thinking or thinking_adapter.supports_thinking(config.model)):
            return
        for warning in thinking_adapter.validate_reasoning_config(config).warnings:
            logger.warning("[%s] %s", provider.value, warning)

    async def chat(
        self,
        provider: ProviderId,
        messages: MessagesInput,
        config: ConfigInput,
    ) -> NormalizedResponse:
        """
        One blocking completion.

        Raises:
            ConfigurationError: If the config fails validation (no network call is made)
            ProviderError: On any upstream failure
        """
        adapter, config = self._prepare(provider, config)
        return await adapter.chat(_coerce_messages(messages), config)

    async def stream_chat(
        self,
        provider: ProviderId,
        messages: MessagesInput,
        config: ConfigInput,
    ) -> AsyncGenerator[StreamFragment, None]:
        """
        Stream a completion fragment by fragment.

        Providers without an incremental mode raise UnsupportedOperationError;
        there is no fallback to a blocking call.
        """
        adapter, config = self._prepare(provider, config)
        if not adapter.supports_streaming:
            raise UnsupportedOperationError(adapter.get_provider_name(), "streaming")

        stream = adapter.stream_chat(_coerce_messages(messages), config)
        try:
            async for fragment in stream:
                yield fragment
        finally:
            await close_quietly(stream)

    async def test_connection(self, provider: ProviderId, config: ConfigInput) -> bool:
        """Check credentials and reachability. Never raises."""
        try:
            config = _coerce_config(config)
            adapter = self._get_adapter(resolve_provider(provider, config.use_responses_api or False))
            return await adapter.test_connection(config)
        except Exception as e:
            logger.warning("Connection test for %s failed: %s", provider, e)
            return False

    async def get_available_models(self, provider: ProviderId, config: ConfigInput) -> List[ModelInfo]:
        """Conversational models of a provider, sorted by id. Errors propagate."""
        config = _coerce_config(config)
        adapter = self._get_adapter(resolve_provider(provider, config.use_responses_api or False))
        return await adapter.get_available_models(config)

    list_models = get_available_models

    @staticmethod
    def get_supported_providers() -> List[str]:
        """Provider ids a caller can address (the Responses variant is reached through ``openai``)."""
        return [p.value for p in ProviderType if p != ProviderType.OPENAI_RESPONSES]

    def _config_for_user(
        self,
        user_id: Optional[str],
        provider: ProviderId,
        model: Optional[str],
        parameters: Dict[str, Any],
    ):
        lookup = self.resolver.get_config(
            user_id, provider, bool(parameters.get("use_responses_api"))
        )
        return lookup.resolved_provider, self.resolver.to_generation_config(lookup, model, **parameters)

    async def chat_for_user(
        self,
        user_id: Optional[str],
        provider: ProviderId,
        messages: MessagesInput,
        model: Optional[str] = None,
        **parameters: Any,
    ) -> NormalizedResponse:
        """
        Chat with the configuration stored for a user, falling back to the environment.

        Raises:
            ConfigurationError: If the provider is not configured for the user
        """
        resolved, config = self._config_for_user(user_id, provider, model, parameters)
        return await self.chat(resolved, messages, config)

    async def stream_chat_for_user(
        self,
        user_id: Optional[str],
        provider: ProviderId,
        messages: MessagesInput,
        model: Optional[str] = None,
        **parameters: Any,
    ) -> AsyncGenerator[StreamFragment, None]:
        resolved, config = self._config_for_user(user_id, provider, model, parameters)
        stream = self.stream_chat(resolved, messages, config)
        try:
            async for fragment in stream:
                yield fragment
        finally:
            await stream.aclose()

    async def test_specific_model(self, provider: ProviderId, config: ConfigInput, model: str) -> bool:
        """Send a tiny chat to one model. Returns False instead of raising."""
        try:
            config = _coerce_config(config).model_copy(
                update={"model": model, "max_tokens": MODEL_TEST_MAX_TOKENS}
            )
            await self.chat(provider, [ChatMessage(role=MessageRole.USER, content=MODEL_TEST_PROMPT)], config)
            return True
        except Exception as e:
            logger.warning("Model test for %s/%s failed: %s", provider, model, e)
            return False

    def get_default_config(self, provider: ProviderId) -> Optional[GenerationConfig]:
        """Environment configuration for a provider, or None when it is not configured."""
        lookup = self.resolver.get_config(None, provider)
        if not lookup.found:
            return None
        return self.resolver.to_generation_config(lookup)
