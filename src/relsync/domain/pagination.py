"""Cursor-driven retrieval of the relationships recorded for one source entity."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .classification import is_authoritative

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from .model import RelationshipPage
    from .ports import RelationshipReader

log = getLogger(__name__)


class RelationshipPager:
    """Walk the relationship pages of a source entity one cursor at a time.

    Pages are requested strictly in order: the cursor returned with page ``n`` is
    needed to request page ``n + 1``.
    """

    def __init__(self, reader: RelationshipReader) -> None:
        self._reader = reader

    async def pages(self, source_guid: str) -> AsyncIterator[RelationshipPage]:
        cursor: str | None = None
        while True:
            page = await self._reader.fetch_page(source_guid, cursor)
            yield page
            next_cursor = page.next_cursor
            if not next_cursor:
                return
            if next_cursor == cursor:
                log.warning(
                    "Relationship cursor for %s did not advance; stopping pagination",
                    source_guid,
                )
                return
            cursor = next_cursor

    async def collect(self, source_guid: str, *, source_name: str | None = None) -> frozenset[str]:
        """Return the guids of every authoritative relationship across all pages."""

        label = source_name or source_guid
        current: set[str] = set()
        page_count = 0
        async for page in self.pages(source_guid):
            page_count += 1
            for record in page.records:
                if record.peer_guid is None or not is_authoritative(record):
                    continue
                current.add(record.peer_guid)
                log.debug("Found relationship for service %s, host %s", label, record.peer_name)
        log.debug("Read %s relationship page(s) for service %s", page_count, label)
        return frozenset(current)


__all__ = ["RelationshipPager"]
