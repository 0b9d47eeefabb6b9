"""Dispatch of single relationship create/delete operations."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .model import MutationOutcome

if TYPE_CHECKING:
    from .model import MutationOperation
    from .ports import RelationshipWriter

log = getLogger(__name__)


class MutationExecutor:
    """Apply one relationship mutation and report what the store said about it.

    Remote-side errors are logged and returned, never retried: the next run picks up
    any edge that is still diverged. Transport errors from the writer propagate.
    """

    def __init__(self, writer: RelationshipWriter, *, dry_run: bool = False) -> None:
        self._writer = writer
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    async def apply(
        self,
        peer_guid: str,
        source_guid: str,
        operation: MutationOperation,
    ) -> MutationOutcome:
        if self._dry_run:
            log.info("Dry run: would %s relationship %s -> %s", operation, peer_guid, source_guid)
            return MutationOutcome(
                peer_guid=peer_guid, source_guid=source_guid, operation=operation
            )

        errors = tuple(await self._writer.apply(peer_guid, source_guid, operation))
        for error in errors:
            log.error(
                "Relationship %s failed for host %s, service %s: type=%s, message=%s",
                operation,
                peer_guid,
                source_guid,
                error.type,
                error.message,
            )
        return MutationOutcome(
            peer_guid=peer_guid,
            source_guid=source_guid,
            operation=operation,
            errors=errors,
        )


__all__ = ["MutationExecutor"]
