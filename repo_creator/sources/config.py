"""Environment-driven configuration for the HTTP adapters.

Usage
-----
Build configuration explicitly:

>>> config = RepoCreatorConfig(base_url="https://api.example.test")
>>> config.timeout_s
20.0

Or from the environment:

>>> import os
>>> os.environ["REPO_CREATOR_API_URL"] = "https://api.example.test"
>>> RepoCreatorConfig.from_env().base_url
'https://api.example.test'

"""

from __future__ import annotations

import dataclasses as dc
import os

from repo_creator.sources.errors import ConfigError

DEFAULT_TIMEOUT_S = 20.0
DEFAULT_USER_AGENT = "repo-creator/0.1"
DEFAULT_GITHUB_API_URL = "https://api.github.com"


def _read(env_var: str) -> str:
    return os.environ.get(env_var, "").strip()


def _parse_timeout(env_var: str, default: float) -> float:
    """Read a positive float from ``env_var``, falling back to ``default``."""
    raw = _read(env_var)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError.invalid(env_var, raw, "a number of seconds") from exc
    if value <= 0:
        raise ConfigError.invalid(env_var, raw, "positive")
    return value


def _parse_url(env_var: str, raw: str) -> str:
    if not raw.startswith(("http://", "https://")):
        raise ConfigError.invalid(env_var, raw, "an http(s) URL")
    return raw.rstrip("/")


@dc.dataclass(frozen=True, slots=True)
class RepoCreatorConfig:
    """Settings for the repo-creator API client.

    Attributes
    ----------
    base_url
        Root URL of the repo-creator API, without a trailing slash.
    token
        Optional bearer token of the signed-in user. Favorites and
        sponsorship calls fail with HTTP 401 without one.
    timeout_s
        Per-request timeout in seconds.
    user_agent
        ``User-Agent`` header sent with each request.

    """

    base_url: str
    token: str | None = None
    timeout_s: float = DEFAULT_TIMEOUT_S
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def signed_in(self) -> bool:
        """Whether requests are made on behalf of a user."""
        return bool(self.token)

    @classmethod
    def from_env(cls) -> RepoCreatorConfig:
        """Build configuration from environment variables.

        Reads ``REPO_CREATOR_API_URL`` (required), ``REPO_CREATOR_TOKEN`` and
        ``REPO_CREATOR_TIMEOUT_S``.

        Raises
        ------
        ConfigError
            If the API URL is missing or a value cannot be parsed.

        """
        raw_url = _read("REPO_CREATOR_API_URL")
        if not raw_url:
            raise ConfigError.missing("REPO_CREATOR_API_URL")
        return cls(
            base_url=_parse_url("REPO_CREATOR_API_URL", raw_url),
            token=_read("REPO_CREATOR_TOKEN") or None,
            timeout_s=_parse_timeout("REPO_CREATOR_TIMEOUT_S", DEFAULT_TIMEOUT_S),
        )


@dc.dataclass(frozen=True, slots=True)
class GitHubSearchConfig:
    """Settings for the GitHub repository search client."""

    api_url: str = DEFAULT_GITHUB_API_URL
    token: str | None = None
    timeout_s: float = DEFAULT_TIMEOUT_S
    user_agent: str = DEFAULT_USER_AGENT
    per_page: int = 30

    @classmethod
    def from_env(cls) -> GitHubSearchConfig:
        """Build configuration from environment variables.

        Reads ``REPO_CREATOR_GITHUB_API_URL``, ``REPO_CREATOR_GITHUB_TOKEN``
        and the shared ``REPO_CREATOR_TIMEOUT_S``. All are optional.
        """
        raw_url = _read("REPO_CREATOR_GITHUB_API_URL")
        return cls(
            api_url=(
                _parse_url("REPO_CREATOR_GITHUB_API_URL", raw_url)
                if raw_url
                else DEFAULT_GITHUB_API_URL
            ),
            token=_read("REPO_CREATOR_GITHUB_TOKEN") or None,
            timeout_s=_parse_timeout("REPO_CREATOR_TIMEOUT_S", DEFAULT_TIMEOUT_S),
        )


__all__ = [
    "DEFAULT_GITHUB_API_URL",
    "DEFAULT_TIMEOUT_S",
    "DEFAULT_USER_AGENT",
    "GitHubSearchConfig",
    "RepoCreatorConfig",
]
