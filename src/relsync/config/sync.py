"""Synchronization defaults for relationship reconciliation runs."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var
from .errors import ConfigurationError

DEFAULT_LOOKBACK_HOURS = 6.0
DEFAULT_MAX_CONCURRENT_SOURCES = 8
DEFAULT_MAX_CONCURRENT_MUTATIONS = 4


@dataclass(frozen=True, slots=True)
class SyncConfig:
    lookback_hours: float = DEFAULT_LOOKBACK_HOURS
    max_concurrent_sources: int = DEFAULT_MAX_CONCURRENT_SOURCES
    max_concurrent_mutations: int = DEFAULT_MAX_CONCURRENT_MUTATIONS
    dry_run: bool = False

    def __post_init__(self) -> None:
        if self.lookback_hours <= 0:
            raise ConfigurationError("Lookback hours must be positive")
        if self.max_concurrent_sources < 1:
            raise ConfigurationError("max_concurrent_sources must be at least 1")
        if self.max_concurrent_mutations < 1:
            raise ConfigurationError("max_concurrent_mutations must be at least 1")


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        lookback_hours=optional_env_var(
            "RELSYNC_LOOKBACK_HOURS", default=DEFAULT_LOOKBACK_HOURS, parse=float
        ),
        max_concurrent_sources=optional_env_var(
            "RELSYNC_MAX_CONCURRENT_SOURCES", default=DEFAULT_MAX_CONCURRENT_SOURCES, parse=int
        ),
        max_concurrent_mutations=optional_env_var(
            "RELSYNC_MAX_CONCURRENT_MUTATIONS",
            default=DEFAULT_MAX_CONCURRENT_MUTATIONS,
            parse=int,
        ),
    )
