"""
Provider selection.

Holds the one aliasing rule of the SDK: a request addressed to ``openai``
is re-targeted onto the Responses API adapter when the request or the
stored configuration asks for it. Configuration lookup still happens under
the base provider's name.
"""

from typing import Union

from ...models.generation import ProviderType
from ...providers.base import ConfigurationError

ProviderId = Union[str, ProviderType]

# Variant ids that share their base provider's stored configuration
CONFIG_LOOKUP_NAMES = {
    ProviderType.OPENAI_RESPONSES: ProviderType.OPENAI.value,
}


def to_provider_type(provider: ProviderId) -> ProviderType:
    """
    Parse a provider id.

    Raises:
        ConfigurationError: If the id is not one of the supported providers
    """
    try:
        return ProviderType(provider)
    except ValueError:
        supported = ", ".join(p.value for p in ProviderType)
        raise ConfigurationError(
            f"Unknown provider: {provider}. Supported providers: {supported}",
            provider=str(provider),
        ) from None


def resolve_provider(
    requested: ProviderId,
    use_responses_api: bool = False,
    stored_flag: bool = False,
) -> ProviderType:
    """Concrete adapter id for a requested provider id."""
    provider = to_provider_type(requested)
    if provider == ProviderType.OPENAI and (use_responses_api or stored_flag):
        return ProviderType.OPENAI_RESPONSES
    return provider


def config_lookup_name(provider: ProviderId) -> str:
    """Name under which a provider's configuration is stored."""
    provider = to_provider_type(provider)
    return CONFIG_LOOKUP_NAMES.get(provider, provider.value)
