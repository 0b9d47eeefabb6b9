from __future__ import annotations

import pytest

from relsync.config import (
    ConfigurationError,
    MissingConfigurationError,
    NerdGraphConfig,
    get_nerdgraph_config,
)


@pytest.fixture
def nerdgraph_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    monkeypatch.setenv("NR_ACCOUNT_ID", "1234567")
    monkeypatch.setenv("NR_USER_API_KEY", "NRAK-TEST")
    monkeypatch.delenv("NR_REGION", raising=False)
    return monkeypatch


def test_config_from_environment(nerdgraph_env: pytest.MonkeyPatch) -> None:
    config = get_nerdgraph_config()

    assert config.account_id == 1234567
    assert config.api_key == "NRAK-TEST"
    assert config.region == "US"
    assert config.endpoint == "https://api.newrelic.com/graphql"


def test_region_is_case_insensitive(nerdgraph_env: pytest.MonkeyPatch) -> None:
    nerdgraph_env.setenv("NR_REGION", "eu")

    config = get_nerdgraph_config()

    assert config.endpoint == "https://api.eu.newrelic.com/graphql"
    assert config.resilience_config().base_url == config.endpoint


def test_missing_credentials_raise(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NR_ACCOUNT_ID", raising=False)
    monkeypatch.delenv("NR_USER_API_KEY", raising=False)

    with pytest.raises(MissingConfigurationError, match="NR_ACCOUNT_ID, NR_USER_API_KEY"):
        get_nerdgraph_config()


@pytest.mark.parametrize("account_id", ["abc", "-5", "0"])
def test_invalid_account_id_raises(nerdgraph_env: pytest.MonkeyPatch, account_id: str) -> None:
    nerdgraph_env.setenv("NR_ACCOUNT_ID", account_id)

    with pytest.raises(ConfigurationError, match="NR_ACCOUNT_ID"):
        get_nerdgraph_config()


def test_unknown_region_raises() -> None:
    with pytest.raises(ConfigurationError, match="region"):
        NerdGraphConfig(account_id=1, api_key="key", region="APAC")


def test_default_resilience_is_rate_limited() -> None:
    resilience = NerdGraphConfig(account_id=1, api_key="key").resilience_config()

    assert resilience.name == "nerdgraph"
    assert resilience.ratelimit is not None
    assert resilience.retry.total == 4
    assert 503 in resilience.retry.status_forcelist
