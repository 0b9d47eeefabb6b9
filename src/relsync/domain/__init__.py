"""Reconciliation core: classify, page, diff and mutate relationships.

Flow for one pass:
1) enumerate source entities (``PopulationDriver``)
2) per source, resolve desired peers and page through recorded relationships
3) diff both guid sets
4) dispatch creates and deletes, awaiting every outcome
"""

from __future__ import annotations

from .classification import is_authoritative
from .driver import PopulationDriver
from .model import (
    DiffResult,
    EdgeTag,
    MutationError,
    MutationOperation,
    MutationOutcome,
    PeerCandidate,
    PopulationRunResult,
    RawEdgeRecord,
    RelationshipPage,
    SourceEntity,
    SourceRunResult,
)
from .mutations import MutationExecutor
from .orchestrator import SourceOrchestrator
from .pagination import RelationshipPager
from .reconcile import diff_edges
from .time_windows import ResolvedWindow, TimeWindow

__all__ = [
    "DiffResult",
    "EdgeTag",
    "MutationError",
    "MutationExecutor",
    "MutationOperation",
    "MutationOutcome",
    "PeerCandidate",
    "PopulationDriver",
    "PopulationRunResult",
    "RawEdgeRecord",
    "RelationshipPage",
    "ResolvedWindow",
    "SourceEntity",
    "SourceOrchestrator",
    "SourceRunResult",
    "TimeWindow",
    "diff_edges",
    "is_authoritative",
]
