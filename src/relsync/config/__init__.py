"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .nerdgraph import NERDGRAPH_ENDPOINTS, NerdGraphConfig, get_nerdgraph_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "NERDGRAPH_ENDPOINTS",
    "ConfigurationError",
    "MissingConfigurationError",
    "NerdGraphConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SyncConfig",
    "get_nerdgraph_config",
    "get_sync_config",
    "optional_env_var",
    "require_env_vars",
]
