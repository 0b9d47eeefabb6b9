"""HTTP client for the NerdGraph GraphQL API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from relsync.adapters.http_resilience import ResilientClient

from .errors import NerdGraphError, NerdGraphQueryError, NerdGraphTransportError
from .schema import GraphQLEnvelope

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    from relsync.config.http_resilience import ResilienceConfig
    from relsync.config.nerdgraph import NerdGraphConfig

log = getLogger(__name__)

API_KEY_HEADER = "API-Key"


class NerdGraphClient:
    """Send GraphQL documents to NerdGraph over one shared resilient HTTP client.

    Use as an async context manager; the underlying connection pool is opened on
    entry and closed on exit.
    """

    def __init__(
        self,
        *,
        config: NerdGraphConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience_config()
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    @property
    def account_id(self) -> int:
        return self._config.account_id

    async def __aenter__(self) -> NerdGraphClient:
        self._client = self._client_factory(self._resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def execute(
        self,
        query: str,
        variables: Mapping[str, object] | None = None,
    ) -> dict[str, object]:
        """Run ``query`` and return the ``data`` member of the response."""

        if self._client is None:
            raise NerdGraphError("NerdGraphClient used outside of its async context")

        body = {"query": query, "variables": dict(variables) if variables else {}}
        try:
            response = await self._client.post(
                self._config.endpoint,
                json=body,
                headers={API_KEY_HEADER: self._config.api_key},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise NerdGraphTransportError(
                f"NerdGraph returned HTTP {status}", status_code=status
            ) from exc
        except httpx.HTTPError as exc:
            raise NerdGraphTransportError(f"NerdGraph request failed: {exc!r}") from exc

        try:
            envelope = GraphQLEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise NerdGraphTransportError(
                "NerdGraph returned an unreadable payload", status_code=response.status_code
            ) from exc

        if envelope.errors:
            messages = tuple(error.message for error in envelope.errors)
            if envelope.data is None:
                raise NerdGraphQueryError(messages)
            log.warning("NerdGraph returned errors alongside data: %s", "; ".join(messages))
        return envelope.data or {}
