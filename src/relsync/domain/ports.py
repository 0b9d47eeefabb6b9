"""Ports for the external collaborators of the reconciliation core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .model import (
        MutationError,
        MutationOperation,
        PeerCandidate,
        RelationshipPage,
        SourceEntity,
    )
    from .time_windows import ResolvedWindow


@runtime_checkable
class PopulationQuery(Protocol):
    """Enumerates every source entity observed within ``window``."""

    async def fetch_sources(self, window: ResolvedWindow) -> Sequence[SourceEntity]: ...


@runtime_checkable
class PeerCandidateQuery(Protocol):
    """Resolves the peers a source entity should be linked to."""

    async def fetch_peer_candidates(
        self,
        source_guid: str,
        window: ResolvedWindow,
    ) -> Sequence[PeerCandidate]: ...


@runtime_checkable
class RelationshipReader(Protocol):
    """Reads one page of recorded relationships for a source entity."""

    async def fetch_page(self, source_guid: str, cursor: str | None) -> RelationshipPage: ...


@runtime_checkable
class RelationshipWriter(Protocol):
    """Creates or deletes one ``peer -> source`` relationship.

    Returns the remote-side errors; an empty sequence means the mutation was accepted.
    """

    async def apply(
        self,
        peer_guid: str,
        source_guid: str,
        operation: MutationOperation,
    ) -> Sequence[MutationError]: ...


__all__ = [
    "PeerCandidateQuery",
    "PopulationQuery",
    "RelationshipReader",
    "RelationshipWriter",
]
