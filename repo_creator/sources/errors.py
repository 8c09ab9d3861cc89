"""Failures raised by repository data sources and mutating actions."""

from __future__ import annotations


class RepoCreatorError(RuntimeError):
    """Base class for failures reported by external collaborators."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)


class SourceError(RepoCreatorError):
    """Raised when fetching a list of repositories fails."""

    @classmethod
    def http_error(cls, source: str, status_code: int) -> SourceError:
        """Return an error for a non-2xx response."""
        return cls(
            f"{source} fetch failed: HTTP {status_code}", status_code=status_code
        )

    @classmethod
    def transport(cls, source: str, exc: BaseException) -> SourceError:
        """Return an error for a request that never produced a response."""
        return cls(f"{source} fetch failed: {exc}")

    @classmethod
    def malformed(cls, source: str, detail: str) -> SourceError:
        """Return an error for a payload that does not decode."""
        return cls(f"{source} returned a malformed payload: {detail}")


class ActionError(RepoCreatorError):
    """Raised when a state-changing request is rejected or fails."""

    @classmethod
    def http_error(cls, action: str, status_code: int) -> ActionError:
        """Return an error for a non-2xx response."""
        return cls(f"{action} failed: HTTP {status_code}", status_code=status_code)

    @classmethod
    def transport(cls, action: str, exc: BaseException) -> ActionError:
        """Return an error for a request that never produced a response."""
        return cls(f"{action} failed: {exc}")

    @classmethod
    def malformed(cls, action: str, detail: str) -> ActionError:
        """Return an error for a payload that does not decode."""
        return cls(f"{action} returned a malformed payload: {detail}")


class ConfigError(ValueError):
    """Raised when client configuration is missing or invalid."""

    @classmethod
    def missing(cls, env_var: str) -> ConfigError:
        """Return an error for a required variable that is unset."""
        return cls(f"{env_var} is required")

    @classmethod
    def invalid(cls, env_var: str, raw: str, expected: str) -> ConfigError:
        """Return an error for a variable with an unusable value."""
        return cls(f"{env_var} must be {expected}, got: {raw!r}")
