"""
Environment variable support for taurine-browser configuration.

This module provides functions to load configuration values from environment
variables with support for type conversion and nested keys.
"""

import os
from typing import Any, Optional, TypeVar, Union, get_args, get_origin

from taurine_browser.errors import ConfigurationError

from .defaults import ENV_PREFIX

T = TypeVar("T")

_TRUE_VALUES = ("true", "1", "yes", "on", "enabled")
_FALSE_VALUES = ("false", "0", "no", "off", "disabled")


def get_env_key(key: str, prefix: str = ENV_PREFIX) -> str:
    """Convert a configuration key to environment variable name.

    Args:
        key: Configuration key (e.g., "retry.attempts")
        prefix: Environment variable prefix

    Returns:
        Environment variable name (e.g., "TAURINE_RETRY_ATTEMPTS")
    """
    return f"{prefix}{key.upper().replace('.', '_').replace('-', '_')}"


def parse_bool(value: str) -> bool:
    """Parse string to boolean."""
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def parse_value(value: str, target_type: type) -> Any:
    """Parse string value to target type.

    Args:
        value: String value
        target_type: Target type

    Returns:
        Parsed value

    Raises:
        ValueError: If the value cannot be converted
    """
    origin = get_origin(target_type)

    if origin is Union:
        # Handle Optional types
        args = get_args(target_type)
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            return parse_value(value, non_none_types[0])
        return value

    if target_type == bool:
        return parse_bool(value)

    if target_type == int:
        return int(value)

    if target_type == float:
        return float(value)

    return value


def get_env(
    key: str,
    default: Optional[T] = None,
    target_type: Optional[type] = None,
    prefix: str = ENV_PREFIX,
) -> Optional[Union[T, str]]:
    """Get configuration value from environment variable.

    Args:
        key: Configuration key (e.g., "activation.timeout")
        default: Default value if not set
        target_type: Target type for parsing
        prefix: Environment variable prefix

    Returns:
        Parsed value or default

    Raises:
        ConfigurationError: If the variable is set but cannot be parsed
    """
    env_key = get_env_key(key, prefix)
    value = os.environ.get(env_key)

    if value is None:
        return default

    # Infer type from default
    if target_type is None and default is not None:
        target_type = type(default)

    if target_type is None:
        return value

    try:
        return parse_value(value, target_type)
    except ValueError as e:
        raise ConfigurationError(f"Invalid value for {env_key}: {value!r}") from e


# Configuration keys read from the environment, with their types.
# The variable name is derived with get_env_key, e.g. TAURINE_RETRY_ATTEMPTS.
ENV_MAPPINGS: dict[str, type] = {
    "api_key": str,
    "api_origin": str,
    "debug_host": str,
    "request_timeout": float,
    "end_on_exit": bool,
    # Retry options
    "retry.attempts": int,
    "retry.base_delay": float,
    "retry.backoff": str,
    "retry.max_delay": float,
    # Activation options
    "activation.timeout": float,
    "activation.interval": float,
    "activation.cleanup_on_timeout": bool,
}


def load_env_config(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """Load configuration from predefined environment variables.

    Returns:
        Nested dictionary of configuration values, only keys that are set

    Raises:
        ConfigurationError: If a set variable cannot be parsed
    """
    result: dict[str, Any] = {}

    for key, target_type in ENV_MAPPINGS.items():
        parsed = get_env(key, target_type=target_type, prefix=prefix)
        if parsed is None:
            continue
        if "." in key:
            section, option = key.split(".", 1)
            result.setdefault(section, {})[option] = parsed
        else:
            result[key] = parsed

    return result
