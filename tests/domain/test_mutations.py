from __future__ import annotations

import asyncio
import logging

import pytest

from relsync.adapters.nerdgraph.errors import NerdGraphTransportError
from relsync.domain.model import MutationError, MutationOperation
from relsync.domain.mutations import MutationExecutor
from tests.support.fakes import InMemoryGraphStore


def test_successful_create_records_edge() -> None:
    store = InMemoryGraphStore()

    outcome = asyncio.run(
        MutationExecutor(store).apply("H1", "SVC-1", MutationOperation.CREATE)
    )

    assert outcome.succeeded
    assert outcome.operation is MutationOperation.CREATE
    assert store.peer_guids("SVC-1") == {"H1"}


def test_rejected_mutation_is_logged_and_returned(caplog: pytest.LogCaptureFixture) -> None:
    rejection = (MutationError(type="INVALID_ENTITY", message="Entity not found"),)
    store = InMemoryGraphStore(
        rejections={("H1", "SVC-1", MutationOperation.DELETE): rejection},
    )

    with caplog.at_level(logging.ERROR):
        outcome = asyncio.run(
            MutationExecutor(store).apply("H1", "SVC-1", MutationOperation.DELETE)
        )

    assert not outcome.succeeded
    assert outcome.errors == rejection
    assert "INVALID_ENTITY" in caplog.text
    assert "Entity not found" in caplog.text
    assert len(store.writes()) == 1


def test_transport_failure_propagates() -> None:
    failure = NerdGraphTransportError("boom", status_code=503)
    store = InMemoryGraphStore(write_errors={"H1": failure})

    with pytest.raises(NerdGraphTransportError):
        asyncio.run(MutationExecutor(store).apply("H1", "SVC-1", MutationOperation.CREATE))


def test_dry_run_skips_writer() -> None:
    store = InMemoryGraphStore()
    executor = MutationExecutor(store, dry_run=True)

    outcome = asyncio.run(executor.apply("H1", "SVC-1", MutationOperation.CREATE))

    assert outcome.succeeded
    assert store.writes() == []
    assert store.peer_guids("SVC-1") == set()
