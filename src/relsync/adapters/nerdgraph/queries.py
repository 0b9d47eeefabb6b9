"""NRQL text and GraphQL documents sent to NerdGraph."""

from __future__ import annotations

from typing import TYPE_CHECKING

from relsync.domain.model import MutationOperation

if TYPE_CHECKING:
    from relsync.domain.time_windows import ResolvedWindow

RELATIONSHIP_TYPE = "HOSTS"
PEER_ENTITY_DOMAIN = "INFRA"
PEER_ENTITY_TYPE = "HOST"

MUTATION_FIELDS: dict[MutationOperation, str] = {
    MutationOperation.CREATE: "entityRelationshipUserDefinedCreateOrReplace",
    MutationOperation.DELETE: "entityRelationshipUserDefinedDelete",
}

NRQL_QUERY = """
query RunNrql($accountId: Int!, $query: Nrql!) {
  actor {
    account(id: $accountId) {
      nrql(query: $query) {
        results
      }
    }
  }
}
"""

RELATED_ENTITIES_QUERY = f"""
query RelatedHosts($guid: EntityGuid!, $cursor: String) {{
  actor {{
    entity(guid: $guid) {{
      relatedEntities(
        filter: {{
          entityDomainTypes: {{
            include: {{type: "{PEER_ENTITY_TYPE}", domain: "{PEER_ENTITY_DOMAIN}"}}
          }}
          relationshipTypes: {{include: {RELATIONSHIP_TYPE}}}
        }}
        cursor: $cursor
      ) {{
        results {{
          source {{
            entity {{
              name
              guid
              tags {{
                key
                values
              }}
            }}
          }}
        }}
        nextCursor
      }}
    }}
  }}
}}
"""


def mutation_document(operation: MutationOperation) -> str:
    field = MUTATION_FIELDS[operation]
    return f"""
mutation UpdateRelationship($sourceEntityGuid: EntityGuid!, $targetEntityGuid: EntityGuid!) {{
  {field}(
    sourceEntityGuid: $sourceEntityGuid
    targetEntityGuid: $targetEntityGuid
    type: {RELATIONSHIP_TYPE}
  ) {{
    errors {{
      message
      type
    }}
  }}
}}
"""


def nrql_literal(value: str) -> str:
    """Quote ``value`` as an NRQL string literal."""

    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def window_clause(window: ResolvedWindow) -> str:
    return f"SINCE {window.start_ms} UNTIL {window.end_ms}"


def population_nrql(window: ResolvedWindow) -> str:
    """Every OpenTelemetry service that sent spans within ``window``."""

    return (
        "SELECT count(*) FROM Span "
        "WHERE newrelic.source = 'api.traces.otlp' AND entity.type = 'SERVICE' "
        f"FACET entity.name, entityGuid {window_clause(window)} LIMIT MAX"
    )


def peer_candidates_nrql(source_guid: str, window: ResolvedWindow) -> str:
    """Infrastructure hosts whose short host name matches a host serving ``source_guid``.

    ``aparse`` drops everything after the first dot, so ``machine.example.com`` in the
    spans matches ``machine`` in ``SystemSample``.
    """

    clause = window_clause(window)
    return (
        "FROM SystemSample JOIN ("
        f"FROM Span SELECT count(*) WHERE entity.guid = {nrql_literal(source_guid)} "
        f"FACET aparse(concat(host.name, '.'), '*.%') AS hostname LIMIT MAX {clause}"
        ") ON hostname "
        f"SELECT count(*) FACET hostname, entityGuid LIMIT MAX {clause}"
    )
