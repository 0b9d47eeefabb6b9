"""Read and write ``HOSTS`` relationships in the New Relic entity graph."""

from __future__ import annotations

from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from relsync.domain.model import MutationError, RelationshipPage

from .queries import MUTATION_FIELDS, RELATED_ENTITIES_QUERY, mutation_document
from .schema import MutationResultPayload, RelatedEntitiesData
from .translator import translate_mutation_errors, translate_relationship_page

if TYPE_CHECKING:
    from relsync.domain.model import MutationOperation

    from .client import NerdGraphClient

log = getLogger(__name__)


class NerdGraphRelationships:
    """Relationship store backed by ``actor.entity.relatedEntities`` and the
    user-defined relationship mutations.

    The host is the relationship source and the service its target, matching the
    ``HOSTS`` edges the infrastructure agent records.
    """

    def __init__(self, client: NerdGraphClient) -> None:
        self._client = client

    async def fetch_page(self, source_guid: str, cursor: str | None) -> RelationshipPage:
        data = await self._client.execute(
            RELATED_ENTITIES_QUERY,
            {"guid": source_guid, "cursor": cursor},
        )
        try:
            related = RelatedEntitiesData.model_validate(data).related_entities
        except ValidationError as exc:
            next_cursor = _raw_next_cursor(data)
            log.warning(
                "Malformed relationship page for %s, skipping its records (next cursor: %s): %s",
                source_guid,
                next_cursor,
                exc,
            )
            return RelationshipPage(next_cursor=next_cursor)
        if related is None:
            # NerdGraph intermittently omits the entity for a valid guid.
            log.warning("No related entities returned for %s, treating page as empty", source_guid)
            return RelationshipPage()
        return translate_relationship_page(related)

    async def apply(
        self,
        peer_guid: str,
        source_guid: str,
        operation: MutationOperation,
    ) -> tuple[MutationError, ...]:
        field = MUTATION_FIELDS[operation]
        data = await self._client.execute(
            mutation_document(operation),
            {"sourceEntityGuid": peer_guid, "targetEntityGuid": source_guid},
        )
        result = data.get(field)
        if result is None:
            return (MutationError(type="MISSING_RESULT", message=f"No {field} result returned"),)
        try:
            payload = MutationResultPayload.model_validate(result)
        except ValidationError as exc:
            return (MutationError(type="MALFORMED_RESULT", message=str(exc)),)
        return translate_mutation_errors(payload)



def _raw_next_cursor(data: Mapping[str, object]) -> str | None:
    node: object = data
    for key in ("actor", "entity", "relatedEntities", "nextCursor"):
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node if isinstance(node, str) and node else None
