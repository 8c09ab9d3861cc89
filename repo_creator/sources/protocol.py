"""Ports for the services a chooser session talks to.

Adapters implement these protocols; the chooser views depend only on them.
Reads raise :class:`~repo_creator.sources.errors.SourceError` on failure and
state-changing calls raise :class:`~repo_creator.sources.errors.ActionError`.
Every list is returned in the order the service ranked it.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from repo_creator.catalog.models import RepositoryDescriptor
    from repo_creator.sources.wire import PaymentAuthorization


@typ.runtime_checkable
class TemplateCatalogue(typ.Protocol):
    """Curated template lists and the mutations that change them."""

    async def get_favorites(self) -> list[RepositoryDescriptor]:
        """Return the signed-in user's favorite templates."""
        ...

    async def get_sponsored(self) -> list[RepositoryDescriptor]:
        """Return templates that have been sponsored."""
        ...

    async def get_popular(self) -> list[RepositoryDescriptor]:
        """Return the popularity ranking of templates."""
        ...

    async def add_favorite(
        self, repository: RepositoryDescriptor
    ) -> list[RepositoryDescriptor]:
        """Favorite ``repository`` and return the updated favorites."""
        ...

    async def remove_favorite(
        self, repository: RepositoryDescriptor
    ) -> list[RepositoryDescriptor]:
        """Unfavorite ``repository`` and return the updated favorites."""
        ...

    async def sponsor(
        self,
        repository: RepositoryDescriptor,
        payment: PaymentAuthorization,
    ) -> list[RepositoryDescriptor]:
        """Sponsor ``repository`` and return the updated sponsored list."""
        ...


@typ.runtime_checkable
class RepositorySearch(typ.Protocol):
    """Free-text repository lookup."""

    async def search(
        self, owner: str | None = None, name: str | None = None
    ) -> list[RepositoryDescriptor]:
        """Return repositories matching the owner and name fragments."""
        ...


@typ.runtime_checkable
class SponsorshipLedger(typ.Protocol):
    """The signed-in user's own sponsorships."""

    async def get_my_sponsorships(self) -> list[RepositoryDescriptor]:
        """Return the repositories the user currently sponsors."""
        ...

    async def cancel_sponsorship(self, repository: RepositoryDescriptor) -> None:
        """Stop sponsoring ``repository``."""
        ...
