"""Set difference between desired and recorded relationships."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .model import DiffResult

if TYPE_CHECKING:
    from collections.abc import Iterable


def diff_edges(desired: Iterable[str], current: Iterable[str]) -> DiffResult:
    """Compute the creates and deletes that converge ``current`` onto ``desired``.

    Both arguments hold peer guids relative to one source entity. Neither input is
    modified, and a guid can never land in both halves of the result.
    """

    desired_set = frozenset(desired)
    current_set = frozenset(current)
    return DiffResult(
        to_create=desired_set - current_set,
        to_delete=current_set - desired_set,
    )


__all__ = ["diff_edges"]
