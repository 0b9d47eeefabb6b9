"""Helpers for faking NerdGraph over ``httpx.MockTransport``."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx

from relsync.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from relsync.config.http_resilience import ResilienceConfig


def make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(async_handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        return client

    return factory


def graphql_body(request: httpx.Request) -> dict[str, object]:
    return json.loads(request.content)


def nrql_response(rows: list[list[str]]) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "data": {
                "actor": {"account": {"nrql": {"results": [{"facet": row} for row in rows]}}}
            }
        },
    )


def related_entities_response(
    entities: list[dict[str, object]],
    next_cursor: str | None = None,
) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "data": {
                "actor": {
                    "entity": {
                        "relatedEntities": {
                            "results": [{"source": {"entity": entity}} for entity in entities],
                            "nextCursor": next_cursor,
                        }
                    }
                }
            }
        },
    )


def host_entity(guid: str, name: str, agent: str = "Infrastructure") -> dict[str, object]:
    return {
        "guid": guid,
        "name": name,
        "tags": [
            {"key": "account", "values": ["Demo"]},
            {"key": "agentName", "values": [agent]},
        ],
    }


def mutation_response(field: str, errors: list[dict[str, str]] | None = None) -> httpx.Response:
    return httpx.Response(200, json={"data": {field: {"errors": errors or []}}})
