"""Session controller listing the signed-in user's own sponsorships."""

from __future__ import annotations

import typing as typ

from repo_creator.catalog.models import as_descriptor
from repo_creator.chooser.routes import NavigationTarget, name_target
from repo_creator.observability import LoggingErrorSink, log_stale_result
from repo_creator.sources.errors import ActionError, SourceError

if typ.TYPE_CHECKING:
    from repo_creator.catalog import RepositoryDescriptor, RepositoryRecord
    from repo_creator.observability import ErrorSink
    from repo_creator.sources.protocol import SponsorshipLedger


class SponsorshipView:
    """Show and manage the repositories the user sponsors.

    The list is only loaded when a user is signed in. After a cancellation
    the list is re-fetched rather than edited locally, and a fetch that
    started before it can no longer replace the list.
    """

    def __init__(
        self,
        ledger: SponsorshipLedger,
        sink: ErrorSink | None = None,
        *,
        logged_in: bool = False,
    ) -> None:
        """Wire the view to the sponsorship ledger."""
        self._ledger = ledger
        self._sink = sink or LoggingErrorSink()
        self.logged_in = logged_in
        self._generation = 0
        self._refresh_sequence = 0
        self._active = False
        self._repositories: tuple[RepositoryDescriptor, ...] = ()

    @property
    def repositories(self) -> tuple[RepositoryDescriptor, ...]:
        """Sponsored repositories, in the order the ledger returned them."""
        return self._repositories

    async def activate(self) -> None:
        """Start a session and load the user's sponsorships."""
        self._generation += 1
        self._active = True
        self._repositories = ()
        if self.logged_in:
            await self._refresh()

    def deactivate(self) -> None:
        """Abandon the session; in-flight results will be dropped."""
        self._active = False
        self._generation += 1

    async def cancel_sponsorship(
        self, repository: RepositoryDescriptor | RepositoryRecord
    ) -> bool:
        """Cancel a sponsorship and reload the list.

        On failure the error is reported and the list is left as it was.
        Returns whether the cancellation succeeded.
        """
        try:
            await self._ledger.cancel_sponsorship(as_descriptor(repository))
        except ActionError as exc:
            self._sink.publish(exc, context="cancel sponsorship")
            return False
        await self._refresh()
        return True

    def select(
        self, repository: RepositoryDescriptor | RepositoryRecord
    ) -> NavigationTarget:
        """Return where to go after a sponsored repository is picked."""
        return name_target(as_descriptor(repository))

    async def _refresh(self) -> None:
        """Fetch the list; only the most recent fetch may replace it."""
        self._refresh_sequence += 1
        generation, sequence = self._generation, self._refresh_sequence
        try:
            repositories = await self._ledger.get_my_sponsorships()
        except SourceError as exc:
            self._sink.publish(exc, context="fetch sponsorships")
            return
        if (
            not self._active
            or generation != self._generation
            or sequence != self._refresh_sequence
        ):
            log_stale_result(f"sponsorship-{generation}", "fetch sponsorships")
            return
        self._repositories = tuple(repositories)
