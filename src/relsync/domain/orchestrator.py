"""Reconcile the relationships of a single source entity."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from .model import MutationError, MutationOperation, MutationOutcome, SourceRunResult
from .reconcile import diff_edges

if TYPE_CHECKING:
    from .model import SourceEntity
    from .mutations import MutationExecutor
    from .pagination import RelationshipPager
    from .ports import PeerCandidateQuery
    from .time_windows import ResolvedWindow

log = getLogger(__name__)

TRANSPORT_ERROR = "TRANSPORT_ERROR"


class SourceOrchestrator:
    """Desired peers -> recorded relationships -> diff -> mutations, for one source.

    Every mutation of a run is awaited before :meth:`run` returns, so the result
    reflects all outcomes. At most ``max_concurrent_mutations`` are in flight.

    A mutation that raises one of ``isolated_errors`` is recorded as a
    ``TRANSPORT_ERROR`` outcome and marks the source as failed; the remaining
    mutations still run.
    """

    def __init__(
        self,
        *,
        peers: PeerCandidateQuery,
        pager: RelationshipPager,
        executor: MutationExecutor,
        window: ResolvedWindow,
        max_concurrent_mutations: int = 4,
        isolated_errors: tuple[type[Exception], ...] = (Exception,),
    ) -> None:
        if max_concurrent_mutations < 1:
            raise ValueError("max_concurrent_mutations must be at least 1")
        self._peers = peers
        self._pager = pager
        self._executor = executor
        self._window = window
        self._max_concurrent_mutations = max_concurrent_mutations
        self._isolated_errors = isolated_errors

    async def run(self, source: SourceEntity) -> SourceRunResult:
        log.info("Found service %s, GUID: %s", source.name, source.guid)
        candidates = await self._peers.fetch_peer_candidates(source.guid, self._window)
        desired = frozenset(candidate.guid for candidate in candidates)
        log.info("Found %s hosts for service %s", len(desired), source.name)

        current = await self._pager.collect(source.guid, source_name=source.name)
        if not current:
            log.info("No relationships found for service %s", source.name)

        diff = diff_edges(desired, current)
        if diff.is_noop:
            log.info(
                "Nothing to reconcile for service %s (%s hosts, %s relationships)",
                source.name,
                len(desired),
                len(current),
            )
            return SourceRunResult(
                source=source,
                desired=desired,
                current=current,
                diff=diff,
                dry_run=self._executor.dry_run,
            )

        host_names = {candidate.guid: candidate.host_name for candidate in candidates}
        for peer_guid in sorted(diff.to_create):
            log.info(
                "Creating relationship for service %s, host %s",
                source.name,
                host_names.get(peer_guid, peer_guid),
            )
        for peer_guid in sorted(diff.to_delete):
            log.info("Deleting relationship for service %s, host guid %s", source.name, peer_guid)

        outcomes = await self._dispatch(source, diff.to_create, diff.to_delete)
        created = _count_succeeded(outcomes, MutationOperation.CREATE)
        deleted = _count_succeeded(outcomes, MutationOperation.DELETE)
        transport_failures = [
            error.message
            for outcome in outcomes
            for error in outcome.errors
            if error.type == TRANSPORT_ERROR
        ]
        log.info(
            "Reconciled service %s: %s created, %s deleted, %s rejected",
            source.name,
            created,
            deleted,
            sum(1 for outcome in outcomes if not outcome.succeeded),
        )
        return SourceRunResult(
            source=source,
            desired=desired,
            current=current,
            diff=diff,
            outcomes=outcomes,
            error=transport_failures[0] if transport_failures else None,
            dry_run=self._executor.dry_run,
        )

    async def _dispatch(
        self,
        source: SourceEntity,
        to_create: frozenset[str],
        to_delete: frozenset[str],
    ) -> tuple[MutationOutcome, ...]:
        semaphore = asyncio.Semaphore(self._max_concurrent_mutations)

        async def bounded(peer_guid: str, operation: MutationOperation) -> MutationOutcome:
            async with semaphore:
                try:
                    return await self._executor.apply(peer_guid, source.guid, operation)
                except self._isolated_errors as exc:
                    log.error(
                        "Relationship %s failed for host %s, service %s: %s",
                        operation,
                        peer_guid,
                        source.name,
                        exc,
                        exc_info=exc,
                    )
                    error = MutationError(
                        type=TRANSPORT_ERROR, message=str(exc) or type(exc).__name__
                    )
                    return MutationOutcome(
                        peer_guid=peer_guid,
                        source_guid=source.guid,
                        operation=operation,
                        errors=(error,),
                    )

        operations = [(guid, MutationOperation.CREATE) for guid in sorted(to_create)]
        operations += [(guid, MutationOperation.DELETE) for guid in sorted(to_delete)]
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(bounded(guid, operation)) for guid, operation in operations]
        return tuple(task.result() for task in tasks)


def _count_succeeded(outcomes: tuple[MutationOutcome, ...], operation: MutationOperation) -> int:
    return sum(1 for outcome in outcomes if outcome.operation is operation and outcome.succeeded)


__all__ = ["TRANSPORT_ERROR", "SourceOrchestrator"]
