"""Routing layer: provider aliasing and per-request configuration."""

from .resolver import (
    ConfigLookupResult,
    ConfigResolver,
    EnvironmentConfigLoader,
    InMemoryUserConfigStore,
    StoredProviderConfig,
    UserConfigStore,
    build_generation_config,
)
from .selector import config_lookup_name, resolve_provider, to_provider_type

__all__ = [
    "ConfigLookupResult",
    "ConfigResolver",
    "EnvironmentConfigLoader",
    "InMemoryUserConfigStore",
    "StoredProviderConfig",
    "UserConfigStore",
    "build_generation_config",
    "config_lookup_name",
    "resolve_provider",
    "to_provider_type",
]
