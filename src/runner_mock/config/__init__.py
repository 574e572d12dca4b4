"""Configuration - config loading and models."""

from .loader import (
    CONFIG_ENV_VAR,
    ConfigLoader,
    deep_merge,
    load_config,
    resolve_env_vars,
)
from .models import (
    AuthConfig,
    LoggingConfig,
    MockServiceConfig,
    RegistryConfig,
    ReleaseConfig,
    ServerConfig,
)

__all__ = [
    # Config models
    "MockServiceConfig",
    "ServerConfig",
    "AuthConfig",
    "LoggingConfig",
    "RegistryConfig",
    "ReleaseConfig",
    # Loader
    "CONFIG_ENV_VAR",
    "ConfigLoader",
    "deep_merge",
    "load_config",
    "resolve_env_vars",
]
