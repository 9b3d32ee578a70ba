"""
Configuration module for taurine-browser.

This module provides the configuration system with support for:
- Strongly-typed option classes (TaurineConfig, RetryOptions, ActivationOptions)
- Configuration file loading (JSON, YAML, TOML)
- Environment variable support
- Validation and type checking via Pydantic

Example usage:
    from taurine_browser.config import (
        ActivationOptions,
        TaurineConfig,
        load_config,
    )

    # Load from file with environment overrides
    config = load_config("taurine.config.json")

    # Create programmatically
    config = TaurineConfig(
        api_key="tk_live_...",
        activation=ActivationOptions(timeout=45.0),
    )

Environment variables:
    TAURINE_API_KEY=tk_live_...
    TAURINE_API_ORIGIN=https://lisa-taurine.tera.space
    TAURINE_ACTIVATION_TIMEOUT=45
    TAURINE_RETRY_ATTEMPTS=5
"""

from taurine_browser.errors import ConfigurationError

from .defaults import (
    DEFAULT_ACTIVATION_INTERVAL,
    DEFAULT_ACTIVATION_TIMEOUT,
    DEFAULT_API_ORIGIN,
    DEFAULT_DEBUG_HOST,
    DEFAULT_PAGE_URL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_BASE_DELAY,
    ENV_PREFIX,
)
from .env import (
    ENV_MAPPINGS,
    get_env,
    get_env_key,
    load_env_config,
)
from .loader import (
    ConfigLoader,
    find_config_file,
    load_config,
    load_file,
    merge_configs,
    save_config,
)
from .options import (
    ActivationOptions,
    RetryOptions,
    TaurineConfig,
)

__all__ = [
    # Main configuration class
    "TaurineConfig",
    # Option classes
    "RetryOptions",
    "ActivationOptions",
    # Loader functions
    "load_config",
    "load_file",
    "save_config",
    "find_config_file",
    "merge_configs",
    "ConfigLoader",
    "ConfigurationError",
    # Environment functions
    "get_env",
    "get_env_key",
    "load_env_config",
    "ENV_MAPPINGS",
    "ENV_PREFIX",
    # Default values
    "DEFAULT_API_ORIGIN",
    "DEFAULT_DEBUG_HOST",
    "DEFAULT_REQUEST_TIMEOUT",
    "DEFAULT_RETRY_ATTEMPTS",
    "DEFAULT_RETRY_BASE_DELAY",
    "DEFAULT_ACTIVATION_TIMEOUT",
    "DEFAULT_ACTIVATION_INTERVAL",
    "DEFAULT_PAGE_URL",
]
