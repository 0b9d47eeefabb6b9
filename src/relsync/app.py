"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from relsync.adapters.nerdgraph import (
    NerdGraphClient,
    NerdGraphError,
    NerdGraphRelationships,
    NerdGraphTelemetry,
)
from relsync.config import get_nerdgraph_config, get_sync_config
from relsync.domain import (
    MutationExecutor,
    PopulationDriver,
    RelationshipPager,
    SourceOrchestrator,
    TimeWindow,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from relsync.adapters.http_resilience import ResilientClient
    from relsync.config import NerdGraphConfig, ResilienceConfig, SyncConfig
    from relsync.domain import PopulationRunResult, ResolvedWindow

log = getLogger(__name__)


def sync_relationships(
    *,
    window: TimeWindow | None = None,
    sync_config: SyncConfig | None = None,
    nerdgraph_config: NerdGraphConfig | None = None,
    client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
) -> PopulationRunResult:
    """Run one reconciliation pass over every service seen in ``window``."""

    active_sync = sync_config or get_sync_config()
    active_window = window or TimeWindow.trailing(active_sync.lookback_hours)
    active_nerdgraph = nerdgraph_config or get_nerdgraph_config()
    result = asyncio.run(
        sync_relationships_async(
            window=active_window.resolve(),
            sync_config=active_sync,
            nerdgraph_config=active_nerdgraph,
            client_factory=client_factory,
        )
    )
    if active_sync.dry_run:
        log.info(
            "Dry run finished: services=%s, would create=%s, would delete=%s, failed=%s",
            result.sources,
            result.would_create,
            result.would_delete,
            len(result.failed),
        )
    else:
        log.info(
            "Relationship sync finished: services=%s, created=%s, deleted=%s, rejected=%s, "
            "failed=%s",
            result.sources,
            result.created,
            result.deleted,
            result.rejected,
            len(result.failed),
        )
    return result


async def sync_relationships_async(
    *,
    window: ResolvedWindow,
    sync_config: SyncConfig,
    nerdgraph_config: NerdGraphConfig,
    client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
) -> PopulationRunResult:
    async with NerdGraphClient(config=nerdgraph_config, client_factory=client_factory) as client:
        telemetry = NerdGraphTelemetry(client)
        relationships = NerdGraphRelationships(client)
        pager = RelationshipPager(relationships)
        executor = MutationExecutor(relationships, dry_run=sync_config.dry_run)

        def build_orchestrator(run_window: ResolvedWindow) -> SourceOrchestrator:
            return SourceOrchestrator(
                peers=telemetry,
                pager=pager,
                executor=executor,
                window=run_window,
                max_concurrent_mutations=sync_config.max_concurrent_mutations,
                isolated_errors=(NerdGraphError,),
            )

        driver = PopulationDriver(
            population=telemetry,
            orchestrator_factory=build_orchestrator,
            max_concurrent_sources=sync_config.max_concurrent_sources,
            isolated_errors=(NerdGraphError,),
            dry_run=sync_config.dry_run,
        )
        return await driver.run(window)
