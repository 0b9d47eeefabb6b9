"""Decide which recorded relationships the reconciler is allowed to manage."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .model import RawEdgeRecord

AGENT_NAME_TAG_KEY = "agentName"
INFRASTRUCTURE_AGENT = "Infrastructure"


def is_authoritative(record: RawEdgeRecord) -> bool:
    """Return whether ``record`` is a host reported by the infrastructure agent.

    Only the first ``agentName`` tag is considered; records without a guid, a name
    or a tag list are never authoritative.
    """

    if not record.peer_guid or not record.peer_name or record.tags is None:
        return False
    for tag in record.tags:
        if tag.key == AGENT_NAME_TAG_KEY:
            return bool(tag.values) and tag.values[0] == INFRASTRUCTURE_AGENT
    return False


__all__ = ["AGENT_NAME_TAG_KEY", "INFRASTRUCTURE_AGENT", "is_authoritative"]
