"""Fan a reconciliation pass out over every discovered source entity."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from .model import PopulationRunResult, SourceRunResult

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from .model import SourceEntity
    from .orchestrator import SourceOrchestrator
    from .ports import PopulationQuery
    from .time_windows import ResolvedWindow

log = getLogger(__name__)

type OrchestratorFactory = Callable[[ResolvedWindow], SourceOrchestrator]


class PopulationDriver:
    """Enumerate source entities and reconcile each one independently.

    A failure of one entity (any exception listed in ``isolated_errors``) is logged
    and recorded on its result; the remaining entities are still attempted.
    ``dry_run`` is copied onto the results of failed entities.
    """

    def __init__(
        self,
        *,
        population: PopulationQuery,
        orchestrator_factory: OrchestratorFactory,
        max_concurrent_sources: int = 8,
        isolated_errors: tuple[type[Exception], ...] = (Exception,),
        dry_run: bool = False,
    ) -> None:
        if max_concurrent_sources < 1:
            raise ValueError("max_concurrent_sources must be at least 1")
        self._population = population
        self._orchestrator_factory = orchestrator_factory
        self._max_concurrent_sources = max_concurrent_sources
        self._isolated_errors = isolated_errors
        self._dry_run = dry_run

    async def run(self, window: ResolvedWindow) -> PopulationRunResult:
        sources = _unique_sources(await self._population.fetch_sources(window))
        log.info(
            "Found %s services between %s and %s",
            len(sources),
            window.start.isoformat(),
            window.end.isoformat(),
        )
        if not sources:
            return PopulationRunResult()

        orchestrator = self._orchestrator_factory(window)
        semaphore = asyncio.Semaphore(self._max_concurrent_sources)

        async def bounded(source: SourceEntity) -> SourceRunResult:
            async with semaphore:
                return await self._run_isolated(orchestrator, source)

        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(bounded(source)) for source in sources]
        return PopulationRunResult(results=tuple(task.result() for task in tasks))

    async def _run_isolated(
        self,
        orchestrator: SourceOrchestrator,
        source: SourceEntity,
    ) -> SourceRunResult:
        error: BaseException | None = None
        try:
            return await orchestrator.run(source)
        except* self._isolated_errors as group:
            error = group.exceptions[0]
            log.error(
                "Reconciliation failed for service %s (%s): %s",
                source.name,
                source.guid,
                error,
                exc_info=error,
            )
        return SourceRunResult(
            source=source,
            error=str(error) or type(error).__name__,
            dry_run=self._dry_run,
        )


def _unique_sources(sources: Iterable[SourceEntity]) -> tuple[SourceEntity, ...]:
    seen: dict[str, SourceEntity] = {}
    for source in sources:
        if source.guid in seen:
            log.debug("Skipping duplicate service %s (%s)", source.name, source.guid)
            continue
        seen[source.guid] = source
    return tuple(seen.values())


__all__ = ["OrchestratorFactory", "PopulationDriver"]
