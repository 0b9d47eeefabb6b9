from __future__ import annotations

import pytest

from relsync.config.nerdgraph import NerdGraphConfig
from relsync.domain.model import SourceEntity
from tests.support.fakes import InMemoryGraphStore


@pytest.fixture
def nerdgraph_config() -> NerdGraphConfig:
    return NerdGraphConfig(account_id=1234567, api_key="NRAK-TEST")


@pytest.fixture
def service() -> SourceEntity:
    return SourceEntity(name="checkout", guid="SVC-1")


@pytest.fixture
def store() -> InMemoryGraphStore:
    return InMemoryGraphStore()
