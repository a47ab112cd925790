"""
Configuration resolution.

Turns ``(user_id, provider)`` into credentials, endpoint and default model,
checking strictly in order: the user's active stored configuration, the
environment, then "not configured". Also validates a GenerationConfig before
any network call.
"""

import logging
import os
from typing import Any, Dict, List, Literal, Mapping, Optional, Protocol, Tuple
from urllib.parse import urlparse

from pydantic import BaseModel, ValidationError

from ...config.constants import (
    DEFAULT_BASE_URLS,
    DEFAULT_MODELS,
    FALLBACK_API_KEY_ENV_VARS,
    INVALID_API_KEY_VALUES,
    KEYLESS_PROVIDERS,
    PROVIDER_ENV_VARS,
)
from ...models.generation import GenerationConfig, ProviderType, ValidationResult
from ...providers.base import ConfigurationError
from .selector import ProviderId, config_lookup_name, resolve_provider, to_provider_type

logger = logging.getLogger(__name__)

ConfigSource = Literal["user", "environment", "none"]


def build_generation_config(values: Mapping[str, Any], provider: Optional[str] = None) -> GenerationConfig:
    """
    GenerationConfig from plain values.

    Raises:
        ConfigurationError: If a value is out of range or of the wrong type;
            ``errors`` lists one ``field: reason`` entry per problem
    """
    try:
        return GenerationConfig(**values)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
        ]
        raise ConfigurationError(
            f"Invalid generation config: {'; '.join(errors)}", provider=provider, errors=errors
        ) from e


class StoredProviderConfig(BaseModel):
    """Provider settings saved for one user (or read from the environment)."""
    provider_name: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    default_model: Optional[str] = None
    is_active: bool = True
    use_responses_api: bool = False


class UserConfigStore(Protocol):
    """Read side of whatever persists per-user provider settings."""

    def get_provider_config(self, user_id: str, provider_name: str) -> Optional[StoredProviderConfig]:
        ...


class InMemoryUserConfigStore:
    """Dict-backed UserConfigStore for embedding and tests."""

    def __init__(self, configs: Optional[Mapping[Tuple[str, str], StoredProviderConfig]] = None):
        self._configs: Dict[Tuple[str, str], StoredProviderConfig] = dict(configs or {})

    def save_provider_config(self, user_id: str, config: StoredProviderConfig) -> None:
        self._configs[(user_id, config.provider_name)] = config

    def get_provider_config(self, user_id: str, provider_name: str) -> Optional[StoredProviderConfig]:
        return self._configs.get((user_id, provider_name))


class EnvironmentConfigLoader:
    """
    Provider settings from environment variables.

    A provider has an environment configuration when its credential variable
    is set; keyless providers always have one. Unset endpoints and models
    fall back to the defaults in ``config.constants``.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def _get(self, name: Optional[str]) -> Optional[str]:
        if not name:
            return None
        value = self.environ.get(name)
        return (value.strip() or None) if isinstance(value, str) else None

    def get_api_key(self, provider_name: str) -> Optional[str]:
        key_var = PROVIDER_ENV_VARS[provider_name][0]
        candidates = (key_var,) + FALLBACK_API_KEY_ENV_VARS.get(provider_name, ())
        for name in candidates:
            value = self._get(name)
            if value:
                return value
        return None

    def load(self, provider_name: str) -> Optional[StoredProviderConfig]:
        if provider_name not in PROVIDER_ENV_VARS:
            return None

        api_key = self.get_api_key(provider_name)
        if not api_key and provider_name not in KEYLESS_PROVIDERS:
            return None

        _, base_url_var, model_var = PROVIDER_ENV_VARS[provider_name]
        return StoredProviderConfig(
            provider_name=provider_name,
            api_key=api_key,
            base_url=self._get(base_url_var) or DEFAULT_BASE_URLS[provider_name],
            default_model=self._get(model_var) or DEFAULT_MODELS[provider_name],
        )


class ConfigLookupResult(BaseModel):
    """Outcome of a configuration lookup. ``found`` is False rather than raising."""
    found: bool
    config: Optional[StoredProviderConfig] = None
    source: ConfigSource = "none"
    resolved_provider: ProviderType
    error: Optional[str] = None


class ConfigResolver:
    """Resolves and validates per-request provider configuration."""

    def __init__(
        self,
        store: Optional[UserConfigStore] = None,
        env_loader: Optional[EnvironmentConfigLoader] = None,
    ):
        self.store = store
        self.env_loader = env_loader or EnvironmentConfigLoader()

    def get_config(
        self,
        user_id: Optional[str],
        provider: ProviderId,
        use_responses_api: bool = False,
    ) -> ConfigLookupResult:
        """
        Find the configuration for a user and provider.

        Raises:
            ConfigurationError: Only for an unknown provider id
        """
        resolved = resolve_provider(provider, use_responses_api)
        lookup_name = config_lookup_name(resolved)

        if user_id and self.store is not None:
            try:
                stored = self.store.get_provider_config(user_id, lookup_name)
            except Exception as e:
                logger.error("Failed to read stored config for %s: %s", lookup_name, e)
                return ConfigLookupResult(
                    found=False,
                    resolved_provider=resolved,
                    error=f"Failed to read stored configuration for {lookup_name}: {e}",
                )
            if stored is not None and stored.is_active:
                logger.debug("Using stored user config for %s", lookup_name)
                return ConfigLookupResult(
                    found=True,
                    config=stored,
                    source="user",
                    resolved_provider=resolve_provider(resolved, stored_flag=stored.use_responses_api),
                )

        env_config = self.env_loader.load(lookup_name)
        if env_config is not None:
            logger.debug("Using environment config for %s", lookup_name)
            return ConfigLookupResult(
                found=True,
                config=env_config,
                source="environment",
                resolved_provider=resolved,
            )

        return ConfigLookupResult(
            found=False,
            resolved_provider=resolved,
            error=self.get_config_error_message(resolved),
        )

    def to_generation_config(
        self,
        lookup: ConfigLookupResult,
        model: Optional[str] = None,
        **parameters: Any,
    ) -> GenerationConfig:
        """
        GenerationConfig for a successful lookup.

        Raises:
            ConfigurationError: If the lookup found nothing
        """
        if not lookup.found or lookup.config is None:
            raise ConfigurationError(
                lookup.error or self.get_config_error_message(lookup.resolved_provider),
                provider=lookup.resolved_provider.value,
            )

        stored = lookup.config
        values: Dict[str, Any] = {
            "provider": lookup.resolved_provider,
            "api_key": stored.api_key,
            "base_url": stored.base_url,
            "model": model or stored.default_model,
        }
        if lookup.resolved_provider == ProviderType.OPENAI_RESPONSES:
            values["use_responses_api"] = True
        values.update(parameters)
        return build_generation_config(values, lookup.resolved_provider.value)

    def validate_config(self, provider: ProviderId, config: GenerationConfig) -> ValidationResult:
        """Blocking errors and advisory warnings for a request config."""
        provider = to_provider_type(provider)
        lookup_name = config_lookup_name(provider)
        errors: List[str] = []
        warnings: List[str] = []

        if lookup_name not in KEYLESS_PROVIDERS:
            if not config.api_key or not config.api_key.strip():
                errors.append(f"{lookup_name} requires an API key")
            elif config.api_key.strip().lower() in INVALID_API_KEY_VALUES:
                errors.append(f"{lookup_name} API key is invalid")

        if config.base_url:
            parsed = urlparse(config.base_url)
            if parsed.scheme not in ("http", "https"):
                errors.append("Base URL must use the http or https scheme")
            elif not parsed.netloc:
                errors.append(f"Base URL is malformed: {config.base_url}")

        if not config.model:
            errors.append(f"{lookup_name} requires a model")

        if provider == ProviderType.OPENAI_RESPONSES and not config.use_responses_api:
            warnings.append("Responses API used without the use_responses_api flag set")
        if provider == ProviderType.CLAUDE and config.temperature is not None and config.top_p is not None:
            warnings.append("Claude recommends setting temperature or top_p, not both")

        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    def get_config_error_message(self, provider: ProviderId) -> str:
        """Setup guidance for a provider with no usable configuration."""
        lookup_name = config_lookup_name(provider)
        key_var = PROVIDER_ENV_VARS.get(lookup_name, (None,))[0]
        if key_var is None:
            return f"No configuration found for {lookup_name}; check that the service is reachable."
        return (
            f"No configuration found for {lookup_name}. "
            f"Set {key_var} in the environment or save a provider configuration for the user."
        )

    @staticmethod
    def get_validation_error_message(provider: ProviderId, result: ValidationResult) -> str:
        if not result.errors:
            return ""
        lines = "\n".join(f"- {error}" for error in result.errors)
        return f"{config_lookup_name(provider)} configuration is invalid:\n{lines}"
