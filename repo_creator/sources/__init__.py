"""Data sources and mutating actions used by chooser sessions."""

from __future__ import annotations

from .client import GitHubSearchClient, RepoCreatorClient
from .config import GitHubSearchConfig, RepoCreatorConfig
from .errors import ActionError, ConfigError, RepoCreatorError, SourceError
from .protocol import RepositorySearch, SponsorshipLedger, TemplateCatalogue
from .wire import PaymentAuthorization, RepositoryWireModel

__all__ = [
    "ActionError",
    "ConfigError",
    "GitHubSearchClient",
    "GitHubSearchConfig",
    "PaymentAuthorization",
    "RepoCreatorClient",
    "RepoCreatorConfig",
    "RepoCreatorError",
    "RepositorySearch",
    "RepositoryWireModel",
    "SourceError",
    "SponsorshipLedger",
    "TemplateCatalogue",
]
