"""NRQL-backed discovery of services and the hosts that serve them."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .errors import NerdGraphQueryError
from .queries import NRQL_QUERY, peer_candidates_nrql, population_nrql
from .schema import NrqlData
from .translator import translate_peer_candidates, translate_sources

if TYPE_CHECKING:
    from relsync.domain.model import PeerCandidate, SourceEntity
    from relsync.domain.time_windows import ResolvedWindow

    from .client import NerdGraphClient
    from .schema import NrqlRow

log = getLogger(__name__)


class NerdGraphTelemetry:
    """Population and peer-candidate queries run through ``actor.account.nrql``."""

    def __init__(self, client: NerdGraphClient) -> None:
        self._client = client

    async def fetch_sources(self, window: ResolvedWindow) -> list[SourceEntity]:
        rows = await self._run_nrql(population_nrql(window))
        return translate_sources(rows)

    async def fetch_peer_candidates(
        self,
        source_guid: str,
        window: ResolvedWindow,
    ) -> list[PeerCandidate]:
        rows = await self._run_nrql(peer_candidates_nrql(source_guid, window))
        return translate_peer_candidates(rows)

    async def _run_nrql(self, nrql: str) -> list[NrqlRow]:
        log.debug("Running NRQL: %s", nrql)
        data = await self._client.execute(
            NRQL_QUERY,
            {"accountId": self._client.account_id, "query": nrql},
        )
        try:
            return NrqlData.model_validate(data).rows
        except ValidationError as exc:
            raise NerdGraphQueryError(("Malformed NRQL result",)) from exc

