"""Translate NerdGraph payloads into reconciliation-core values."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from relsync.domain.model import (
    EdgeTag,
    MutationError,
    PeerCandidate,
    RawEdgeRecord,
    RelationshipPage,
    SourceEntity,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .schema import (
        MutationResultPayload,
        NrqlRow,
        RelatedEntitiesPayload,
        RelatedEntityPayload,
        TagPayload,
    )

log = getLogger(__name__)


def _facet_pair(row: NrqlRow) -> tuple[str, str] | None:
    facets = row.facets
    if len(facets) < 2 or not facets[0] or not facets[1]:
        log.warning("Skipping NRQL row without two facets: %s", row.facet)
        return None
    return facets[0], facets[1]


def translate_sources(rows: Iterable[NrqlRow]) -> list[SourceEntity]:
    sources: list[SourceEntity] = []
    for row in rows:
        pair = _facet_pair(row)
        if pair is not None:
            sources.append(SourceEntity(name=pair[0], guid=pair[1]))
    return sources


def translate_peer_candidates(rows: Iterable[NrqlRow]) -> list[PeerCandidate]:
    candidates: list[PeerCandidate] = []
    for row in rows:
        pair = _facet_pair(row)
        if pair is not None:
            candidates.append(PeerCandidate(host_name=pair[0], guid=pair[1]))
    return candidates


def _translate_tags(tags: Iterable[TagPayload | None]) -> tuple[EdgeTag, ...] | None:
    translated: list[EdgeTag] = []
    for tag in tags:
        if tag is None or tag.key is None:
            return None
        values = tuple(value for value in tag.values if value is not None)
        if len(values) != len(tag.values):
            return None
        translated.append(EdgeTag(key=tag.key, values=values))
    return tuple(translated)


def translate_related_entity(payload: RelatedEntityPayload) -> RawEdgeRecord:
    entity = payload.source.entity if payload.source is not None else None
    if entity is None:
        return RawEdgeRecord(peer_guid=None, peer_name=None, tags=None)
    tags = _translate_tags(entity.tags) if entity.tags is not None else None
    if entity.tags is not None and tags is None:
        log.warning("Ignoring malformed tags of related entity %s", entity.guid)
    return RawEdgeRecord(peer_guid=entity.guid, peer_name=entity.name, tags=tags)


def translate_relationship_page(payload: RelatedEntitiesPayload) -> RelationshipPage:
    return RelationshipPage(
        records=tuple(translate_related_entity(result) for result in payload.results),
        next_cursor=payload.next_cursor or None,
    )


def translate_mutation_errors(payload: MutationResultPayload) -> tuple[MutationError, ...]:
    return tuple(
        MutationError(type=error.type or "UNKNOWN", message=error.message or "")
        for error in payload.errors
    )
