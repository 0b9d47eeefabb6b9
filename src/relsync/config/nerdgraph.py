"""NerdGraph (New Relic GraphQL API) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

NERDGRAPH_ENDPOINTS = {
    "US": "https://api.newrelic.com/graphql",
    "EU": "https://api.eu.newrelic.com/graphql",
}
DEFAULT_REGION = "US"
NERDGRAPH_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class NerdGraphConfig:
    """Account, credential and transport settings for NerdGraph calls."""

    account_id: int
    api_key: str
    region: str = DEFAULT_REGION
    resilience: ResilienceConfig | None = None

    def __post_init__(self) -> None:
        if self.region not in NERDGRAPH_ENDPOINTS:
            known = ", ".join(sorted(NERDGRAPH_ENDPOINTS))
            raise ConfigurationError(f"Unknown New Relic region {self.region!r} (expected {known})")

    @property
    def endpoint(self) -> str:
        return NERDGRAPH_ENDPOINTS[self.region]

    def resilience_config(self) -> ResilienceConfig:
        if self.resilience is not None:
            return self.resilience
        return default_resilience_config(self.region)


def default_resilience_config(region: str = DEFAULT_REGION) -> ResilienceConfig:
    return ResilienceConfig(
        name="nerdgraph",
        base_url=NERDGRAPH_ENDPOINTS[region],
        timeout_seconds=NERDGRAPH_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=4),
        ratelimit=RateLimit(max_calls=25, per_seconds=1.0),
        default_headers={"Content-Type": "application/json"},
    )


def _parse_account_id(value: str) -> int:
    account_id = int(value)
    if account_id <= 0:
        raise ValueError("account id must be positive")
    return account_id


def get_nerdgraph_config(*, resilience: ResilienceConfig | None = None) -> NerdGraphConfig:
    values = require_env_vars(("NR_ACCOUNT_ID", "NR_USER_API_KEY"))
    try:
        account_id = _parse_account_id(values["NR_ACCOUNT_ID"])
    except ValueError as exc:
        raise ConfigurationError(f"Invalid NR_ACCOUNT_ID: {values['NR_ACCOUNT_ID']!r}") from exc
    region = optional_env_var("NR_REGION", default=DEFAULT_REGION, parse=str.upper)
    return NerdGraphConfig(
        account_id=account_id,
        api_key=values["NR_USER_API_KEY"],
        region=region,
        resilience=resilience,
    )
