"""Public interface for the NerdGraph adapter."""

from __future__ import annotations

from .client import NerdGraphClient
from .errors import NerdGraphError, NerdGraphQueryError, NerdGraphTransportError
from .relationships import NerdGraphRelationships
from .telemetry import NerdGraphTelemetry

__all__ = [
    "NerdGraphClient",
    "NerdGraphError",
    "NerdGraphQueryError",
    "NerdGraphRelationships",
    "NerdGraphTelemetry",
    "NerdGraphTransportError",
]
