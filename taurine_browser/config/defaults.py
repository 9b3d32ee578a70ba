"""
Default configuration values for taurine-browser.

This module contains all default values used throughout the configuration system.
"""

# Service defaults
DEFAULT_API_ORIGIN = "https://lisa-taurine.tera.space"
DEFAULT_DEBUG_HOST = "gcp-usc1-1.milan-taurine.tera.space"
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_END_ON_EXIT = True

# Retry defaults (session creation only)
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_BASE_DELAY = 1.0
DEFAULT_RETRY_BACKOFF = "linear"
DEFAULT_RETRY_MAX_DELAY = 30.0

# Activation polling defaults
DEFAULT_ACTIVATION_TIMEOUT = 20.0
DEFAULT_ACTIVATION_INTERVAL = 1.0
DEFAULT_CLEANUP_ON_TIMEOUT = True

# Page defaults
DEFAULT_PAGE_URL = "about:blank"

# Debugging endpoint
CONSUMER_PATH_PREFIX = "/v1/consumer"

# File config defaults
DEFAULT_CONFIG_FILENAME = "taurine.config"
DEFAULT_CONFIG_EXTENSIONS = [".json", ".yaml", ".yml", ".toml"]
DEFAULT_CONFIG_SEARCH_PATHS = [
    ".",
    "~/.config/taurine-browser",
]

# Environment variable prefix
ENV_PREFIX = "TAURINE_"

