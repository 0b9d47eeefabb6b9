"""In-memory stand-ins for the reconciliation ports."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime

from relsync.domain.model import (
    EdgeTag,
    MutationError,
    MutationOperation,
    PeerCandidate,
    RawEdgeRecord,
    RelationshipPage,
    SourceEntity,
)
from relsync.domain.time_windows import ResolvedWindow

WINDOW = ResolvedWindow(
    start=datetime(2025, 1, 1, 6, tzinfo=UTC),
    end=datetime(2025, 1, 1, 12, tzinfo=UTC),
)

INFRA_TAGS = (
    EdgeTag(key="account", values=("Demo",)),
    EdgeTag(key="agentName", values=("Infrastructure",)),
)


def host_record(guid: str, name: str | None = None) -> RawEdgeRecord:
    return RawEdgeRecord(peer_guid=guid, peer_name=name or f"host-{guid}", tags=INFRA_TAGS)


def otel_record(guid: str, name: str | None = None) -> RawEdgeRecord:
    return RawEdgeRecord(
        peer_guid=guid,
        peer_name=name or f"otel-{guid}",
        tags=(EdgeTag(key="agentName", values=("OpenTelemetry",)),),
    )


def candidates(*guids: str) -> list[PeerCandidate]:
    return [PeerCandidate(host_name=f"host-{guid}", guid=guid) for guid in guids]


@dataclass
class FakePopulation:
    sources: list[SourceEntity] = field(default_factory=list)
    windows: list[ResolvedWindow] = field(default_factory=list)
    error: Exception | None = None

    async def fetch_sources(self, window: ResolvedWindow) -> list[SourceEntity]:
        self.windows.append(window)
        if self.error is not None:
            raise self.error
        return list(self.sources)


@dataclass
class FakePeers:
    peers: dict[str, list[PeerCandidate]] = field(default_factory=dict)
    errors: dict[str, Exception] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def fetch_peer_candidates(
        self, source_guid: str, window: ResolvedWindow
    ) -> list[PeerCandidate]:
        del window
        self.calls.append(source_guid)
        if source_guid in self.errors:
            raise self.errors[source_guid]
        return list(self.peers.get(source_guid, []))


@dataclass
class InMemoryGraphStore:
    """Relationship store that serves fixed-size pages and applies mutations.

    ``events`` records every read and write in call order so tests can assert on
    sequencing.
    """

    edges: dict[str, list[RawEdgeRecord]] = field(default_factory=dict)
    page_size: int = 2
    rejections: dict[tuple[str, str, MutationOperation], tuple[MutationError, ...]] = field(
        default_factory=dict
    )
    write_errors: dict[str, Exception] = field(default_factory=dict)
    events: list[tuple[str, ...]] = field(default_factory=list)
    in_flight: int = 0
    max_in_flight: int = 0

    async def fetch_page(self, source_guid: str, cursor: str | None) -> RelationshipPage:
        self.events.append(("read", source_guid, cursor or ""))
        records = self.edges.get(source_guid, [])
        offset = int(cursor) if cursor else 0
        chunk = tuple(records[offset : offset + self.page_size])
        next_offset = offset + self.page_size
        next_cursor = str(next_offset) if next_offset < len(records) else None
        await asyncio.sleep(0)
        return RelationshipPage(records=chunk, next_cursor=next_cursor)

    async def apply(
        self,
        peer_guid: str,
        source_guid: str,
        operation: MutationOperation,
    ) -> tuple[MutationError, ...]:
        self.events.append((str(operation), source_guid, peer_guid))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if peer_guid in self.write_errors:
                raise self.write_errors[peer_guid]
            rejected = self.rejections.get((peer_guid, source_guid, operation))
            if rejected:
                return rejected
            records = self.edges.setdefault(source_guid, [])
            records[:] = [record for record in records if record.peer_guid != peer_guid]
            if operation is MutationOperation.CREATE:
                records.append(host_record(peer_guid))
            return ()
        finally:
            self.in_flight -= 1

    def peer_guids(self, source_guid: str) -> set[str]:
        return {
            record.peer_guid
            for record in self.edges.get(source_guid, [])
            if record.peer_guid is not None
        }

    def writes(self) -> list[tuple[str, ...]]:
        return [event for event in self.events if event[0] != "read"]
