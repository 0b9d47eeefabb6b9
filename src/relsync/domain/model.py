"""Value types shared by the reconciliation core.

Everything here is rebuilt from scratch on every run; nothing is persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


@dataclass(frozen=True, slots=True)
class SourceEntity:
    """Entity that owns outgoing relationships (an instrumented service)."""

    name: str
    guid: str


@dataclass(frozen=True, slots=True)
class PeerCandidate:
    """Desired relationship target discovered via telemetry correlation."""

    host_name: str
    guid: str


@dataclass(frozen=True, slots=True)
class EdgeTag:
    key: str
    values: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RawEdgeRecord:
    """One related entity as returned by the graph store, before classification."""

    peer_guid: str | None
    peer_name: str | None
    tags: tuple[EdgeTag, ...] | None


@dataclass(frozen=True, slots=True)
class RelationshipPage:
    records: tuple[RawEdgeRecord, ...] = ()
    next_cursor: str | None = None


@dataclass(frozen=True, slots=True)
class DiffResult:
    to_create: frozenset[str] = frozenset()
    to_delete: frozenset[str] = frozenset()

    @property
    def is_noop(self) -> bool:
        return not self.to_create and not self.to_delete


class MutationOperation(StrEnum):
    CREATE = "create"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class MutationError:
    type: str
    message: str


@dataclass(frozen=True, slots=True)
class MutationOutcome:
    """Result of one dispatched create or delete for a ``peer -> source`` edge."""

    peer_guid: str
    source_guid: str
    operation: MutationOperation
    errors: tuple[MutationError, ...] = ()

    @property
    def succeeded(self) -> bool:
        return not self.errors


@dataclass(frozen=True, slots=True)
class SourceRunResult:
    """Summary of reconciling one source entity."""

    source: SourceEntity
    desired: frozenset[str] = frozenset()
    current: frozenset[str] = frozenset()
    diff: DiffResult = field(default_factory=DiffResult)
    outcomes: tuple[MutationOutcome, ...] = ()
    error: str | None = None
    dry_run: bool = False

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True, slots=True)
class PopulationRunResult:
    """Summary of one reconciliation pass over every discovered source entity.

    ``created`` and ``deleted`` count writes that happened; dry-run results only
    contribute to ``would_create`` and ``would_delete``.
    """

    results: tuple[SourceRunResult, ...] = ()

    @property
    def sources(self) -> int:
        return len(self.results)

    @property
    def created(self) -> int:
        return self._count(MutationOperation.CREATE)

    @property
    def deleted(self) -> int:
        return self._count(MutationOperation.DELETE)

    @property
    def rejected(self) -> int:
        return sum(
            1 for result in self.results for outcome in result.outcomes if not outcome.succeeded
        )

    @property
    def failed(self) -> tuple[SourceRunResult, ...]:
        return tuple(result for result in self.results if result.failed)

    @property
    def would_create(self) -> int:
        return sum(len(result.diff.to_create) for result in self.results if result.dry_run)

    @property
    def would_delete(self) -> int:
        return sum(len(result.diff.to_delete) for result in self.results if result.dry_run)

    def _count(self, operation: MutationOperation) -> int:
        return sum(
            1
            for result in self.results
            if not result.dry_run
            for outcome in result.outcomes
            if outcome.operation is operation and outcome.succeeded
        )
