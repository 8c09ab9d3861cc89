"""msgspec wire models for the repo-creator and GitHub search APIs."""

from __future__ import annotations

import msgspec

from repo_creator.catalog.models import RepositoryDescriptor

DEFAULT_PROVIDER = "GitHub"


class RepositoryWireModel(msgspec.Struct, kw_only=True):
    """Repository reference as exchanged with the repo-creator API.

    Attributes
    ----------
    provider : str
        Hosting provider; only ``GitHub`` is served today.
    owner : str
        Repository owner (user or organisation).
    name : str
        Repository name.

    """

    owner: str
    name: str
    provider: str = DEFAULT_PROVIDER

    @classmethod
    def from_descriptor(cls, descriptor: RepositoryDescriptor) -> RepositoryWireModel:
        """Build the wire form of a catalog identity."""
        return cls(owner=descriptor.owner, name=descriptor.name)

    def to_descriptor(self) -> RepositoryDescriptor:
        """Return the catalog identity for this repository."""
        return RepositoryDescriptor(self.owner, self.name)


class SponsorshipWireModel(msgspec.Struct, kw_only=True):
    """A sponsorship held by the signed-in user."""

    repository: RepositoryWireModel


class PaymentAuthorization(msgspec.Struct, kw_only=True, rename="camel"):
    """Card token issued by the checkout provider for a sponsorship.

    Attributes
    ----------
    token_id : str
        Single-use token identifying the authorised payment.
    email : str
        Billing email supplied at checkout.

    """

    token_id: str
    email: str


class SponsorRequest(msgspec.Struct, kw_only=True, rename="camel"):
    """Body of a sponsorship purchase."""

    repository: RepositoryWireModel
    payment: PaymentAuthorization


class GitHubOwner(msgspec.Struct):
    """Owner block of a GitHub search item."""

    login: str


class GitHubSearchItem(msgspec.Struct):
    """Single repository returned by GitHub search."""

    name: str
    owner: GitHubOwner

    def to_descriptor(self) -> RepositoryDescriptor:
        """Return the catalog identity for this repository."""
        return RepositoryDescriptor(self.owner.login, self.name)


class GitHubSearchResponse(msgspec.Struct):
    """Envelope of the GitHub repository search endpoint."""

    items: list[GitHubSearchItem] = msgspec.field(default_factory=list)
    total_count: int = 0


__all__ = [
    "DEFAULT_PROVIDER",
    "GitHubOwner",
    "GitHubSearchItem",
    "GitHubSearchResponse",
    "PaymentAuthorization",
    "RepositoryWireModel",
    "SponsorRequest",
    "SponsorshipWireModel",
]
