"""Error reporting for chooser sessions.

Every failed fetch or action is published once to an :class:`ErrorSink`.
Publishing is fire-and-forget: sinks must not raise and nothing is retried.
:class:`LoggingErrorSink` is the default sink and writes one structured
femtologging record per failure, tagged with an :class:`ErrorCategory` that
alert routing can key on.
"""

from __future__ import annotations

import enum
import http
import typing as typ

import httpx
import msgspec

from repo_creator.logging import get_logger, log_error, log_warning
from repo_creator.sources.errors import ActionError, RepoCreatorError

logger = get_logger(__name__)

_HTTP_SERVER_ERROR_THRESHOLD = 500


class ChooserEventType(enum.StrEnum):
    """Structured log event types emitted by chooser sessions."""

    ERROR = "chooser.error"
    STALE_RESULT = "chooser.stale_result"


class ErrorCategory(enum.StrEnum):
    """Categories for error classification in alerts."""

    TRANSIENT = "transient"
    CLIENT_ERROR = "client_error"
    PAYMENT_DECLINED = "payment_declined"
    MALFORMED = "malformed"
    UNKNOWN = "unknown"


_CAUSE_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (msgspec.DecodeError, ErrorCategory.MALFORMED),
    (httpx.HTTPError, ErrorCategory.TRANSIENT),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize a source or action failure for alerting purposes."""
    if not isinstance(exc, RepoCreatorError):
        return ErrorCategory.UNKNOWN

    status = exc.status_code
    if status is not None:
        if isinstance(exc, ActionError) and status == http.HTTPStatus.PAYMENT_REQUIRED:
            return ErrorCategory.PAYMENT_DECLINED
        if status >= _HTTP_SERVER_ERROR_THRESHOLD:
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR

    for cause_type, category in _CAUSE_CATEGORY_MAP:
        if isinstance(exc.__cause__, cause_type):
            return category
    return ErrorCategory.UNKNOWN


@typ.runtime_checkable
class ErrorSink(typ.Protocol):
    """Destination for failures raised while serving a chooser session."""

    def publish(self, error: BaseException, *, context: str) -> None:
        """Record ``error``; ``context`` names the operation that failed."""
        ...


class LoggingErrorSink:
    """Publish failures as structured femtologging records."""

    def publish(self, error: BaseException, *, context: str) -> None:
        """Log ``error`` at ERROR level with its category."""
        log_error(
            logger,
            "[%s] context=%s error_type=%s error_category=%s status_code=%s "
            "error_message=%s",
            ChooserEventType.ERROR,
            context,
            type(error).__name__,
            categorize_error(error),
            getattr(error, "status_code", None),
            str(error),
            exc_info=error,
        )


def log_stale_result(session_id: str, operation: str) -> None:
    """Record that a late result for an abandoned session was dropped."""
    log_warning(
        logger,
        "[%s] session_id=%s operation=%s",
        ChooserEventType.STALE_RESULT,
        session_id,
        operation,
    )


__all__ = [
    "ChooserEventType",
    "ErrorCategory",
    "ErrorSink",
    "LoggingErrorSink",
    "categorize_error",
    "log_stale_result",
]
