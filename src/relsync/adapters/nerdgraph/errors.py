"""Errors raised by the NerdGraph adapter."""

from __future__ import annotations


class NerdGraphError(RuntimeError):
    """Base class for NerdGraph failures."""


class NerdGraphTransportError(NerdGraphError):
    """Raised when a request fails at the HTTP level (after retries)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NerdGraphQueryError(NerdGraphError):
    """Raised when the GraphQL response carries errors and no data."""

    def __init__(self, messages: tuple[str, ...]) -> None:
        super().__init__("; ".join(messages) or "NerdGraph returned no data")
        self.messages = messages
