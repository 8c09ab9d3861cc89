"""Errors raised by the repository catalog."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for catalog errors."""


class CatalogDiscardedError(CatalogError):
    """Raised when a discarded catalog is asked to change.

    Views discard their catalog on deactivation; results that arrive later
    must be dropped before they reach the catalog.
    """

    def __init__(self, session_id: str) -> None:
        """Initialise with the session that owned the catalog."""
        self.session_id = session_id
        super().__init__(f"Catalog for session {session_id} has been discarded")
