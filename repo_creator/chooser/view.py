"""Session controller for choosing a template repository.

The view owns one :class:`~repo_creator.catalog.RepositoryCatalog` per
activation. Fetches run concurrently and apply their results whenever they
land. Results that belong to an abandoned activation, or that were overtaken
by a newer search or mutation of the same category, are dropped instead of
being merged over fresher data.
"""

from __future__ import annotations

import asyncio
import dataclasses
import typing as typ

from repo_creator.catalog import Category, RepositoryCatalog
from repo_creator.catalog.models import as_descriptor
from repo_creator.chooser.routes import NavigationTarget, name_target
from repo_creator.logging import get_logger, log_info
from repo_creator.observability import LoggingErrorSink, log_stale_result
from repo_creator.sources.errors import ActionError, SourceError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from repo_creator.catalog import RepositoryDescriptor, RepositoryRecord
    from repo_creator.observability import ErrorSink
    from repo_creator.sources.protocol import RepositorySearch, TemplateCatalogue
    from repo_creator.sources.wire import PaymentAuthorization

logger = get_logger(__name__)

type RepositoryRef = RepositoryDescriptor | RepositoryRecord
type Fetch = cabc.Callable[[], cabc.Awaitable[list[RepositoryDescriptor]]]


@dataclasses.dataclass(frozen=True, slots=True)
class _Ticket:
    """Identifies the activation and category request a response belongs to.

    Only the most recent request for a category may apply its response.
    """

    generation: int
    catalog: RepositoryCatalog
    category: Category
    sequence: int


class ChooseRepositoryView:
    """Aggregate template lists for one visit to the chooser screen.

    Parameters
    ----------
    templates:
        Favorites, sponsored and popular lists plus the favorite and sponsor
        actions.
    search:
        Repository search source.
    sink:
        Receives every fetch or action failure. Defaults to
        :class:`~repo_creator.observability.LoggingErrorSink`.
    logged_in:
        Whether a user is signed in; favorites are only fetched when true.

    """

    def __init__(
        self,
        templates: TemplateCatalogue,
        search: RepositorySearch,
        sink: ErrorSink | None = None,
        *,
        logged_in: bool = False,
    ) -> None:
        """Wire the view to its sources; call :meth:`activate` to load."""
        self._templates = templates
        self._search = search
        self._sink = sink or LoggingErrorSink()
        self.logged_in = logged_in
        self._generation = 0
        self._sequences: dict[Category, int] = {}
        self._active = False
        self._catalog = RepositoryCatalog()

    # -- lifecycle ---------------------------------------------------------

    async def activate(self) -> None:
        """Start a fresh session and load the curated lists concurrently.

        Sponsored and popular repositories are always requested; favorites
        only when a user is signed in. Returns once every fetch has settled.
        """
        self._start_session()
        loads = [
            self._load(Category.SPONSORED, self._templates.get_sponsored),
            self._load(Category.POPULAR, self._templates.get_popular),
        ]
        if self.logged_in:
            loads.append(self._load(Category.FAVORITE, self._templates.get_favorites))
        await asyncio.gather(*loads)

    def deactivate(self) -> None:
        """Abandon the session; in-flight results will be dropped."""
        self._catalog.discard()
        self._active = False
        self._generation += 1
        log_info(logger, "Chooser session %s deactivated", self._catalog.session_id)

    def _start_session(self) -> None:
        if self._active:
            self._catalog.discard()
        self._generation += 1
        self._sequences = {}
        self._catalog = RepositoryCatalog()
        self._active = True
        log_info(logger, "Chooser session %s activated", self._catalog.session_id)

    # -- reads -------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        """Whether the view is between :meth:`activate` and :meth:`deactivate`."""
        return self._active

    @property
    def catalog(self) -> RepositoryCatalog:
        """Catalog of the current (or most recent) session."""
        return self._catalog

    @property
    def favorites(self) -> tuple[RepositoryRecord, ...]:
        """Favorite templates of the signed-in user."""
        return self._catalog.favorites

    @property
    def sponsored(self) -> tuple[RepositoryRecord, ...]:
        """Sponsored templates."""
        return self._catalog.sponsored

    @property
    def popular(self) -> tuple[RepositoryRecord, ...]:
        """Popular templates."""
        return self._catalog.popular

    @property
    def search_results(self) -> tuple[RepositoryRecord, ...]:
        """Results of the latest search."""
        return self._catalog.search_results

    # -- user actions ------------------------------------------------------

    async def search(self, owner: str | None = None, name: str | None = None) -> bool:
        """Replace the search results with a new search.

        Previous results are cleared before the request is sent. If the
        search fails the results stay empty and the failure is reported.
        Returns whether new results were applied.
        """
        self._require_active()
        self._catalog.clear_category(Category.SEARCH_RESULT)
        return await self._load(
            Category.SEARCH_RESULT, lambda: self._search.search(owner, name)
        )

    async def toggle_favorite(self, repository: RepositoryRef) -> bool:
        """Favorite or unfavorite ``repository`` depending on its current state.

        The server's updated favorites list replaces the local one. On
        failure nothing changes locally. Returns whether the change applied.
        """
        self._require_active()
        descriptor = as_descriptor(repository)
        record = self._catalog.get(descriptor.owner, descriptor.name)
        if record is not None and record.is_favorite:
            return await self._mutate(
                Category.FAVORITE,
                lambda: self._templates.remove_favorite(descriptor),
                context="remove favorite",
            )
        return await self._mutate(
            Category.FAVORITE,
            lambda: self._templates.add_favorite(descriptor),
            context="add favorite",
        )

    async def sponsor(
        self, repository: RepositoryRef, payment: PaymentAuthorization
    ) -> bool:
        """Sponsor ``repository`` using an authorised payment.

        Already-sponsored repositories are left alone. Returns whether the
        sponsored list was replaced.
        """
        self._require_active()
        descriptor = as_descriptor(repository)
        record = self._catalog.get(descriptor.owner, descriptor.name)
        if record is not None and record.is_sponsored:
            return False
        return await self._mutate(
            Category.SPONSORED,
            lambda: self._templates.sponsor(descriptor, payment),
            context="sponsor",
        )

    def select(self, repository: RepositoryRef) -> NavigationTarget:
        """Return where to go after ``repository`` is picked as the template."""
        return name_target(as_descriptor(repository))

    # -- plumbing ----------------------------------------------------------

    def _require_active(self) -> None:
        if not self._active:
            msg = "Chooser view is not active; call activate() first"
            raise RuntimeError(msg)

    def _ticket(self, category: Category) -> _Ticket:
        """Issue a ticket that supersedes earlier ones for ``category``."""
        sequence = self._sequences.get(category, 0) + 1
        self._sequences[category] = sequence
        return _Ticket(self._generation, self._catalog, category, sequence)

    def _withdraw(self, ticket: _Ticket) -> None:
        """Let the previous request for a category apply again.

        Used when a mutation fails, since it produced no list of its own.
        """
        if (
            ticket.catalog is self._catalog
            and self._sequences.get(ticket.category) == ticket.sequence
        ):
            self._sequences[ticket.category] = ticket.sequence - 1

    def _is_current(self, ticket: _Ticket) -> bool:
        if not self._active or ticket.generation != self._generation:
            return False
        if ticket.catalog is not self._catalog or ticket.catalog.is_discarded:
            return False
        return ticket.sequence == self._sequences.get(ticket.category)

    async def _load(self, category: Category, fetch: Fetch) -> bool:
        context = f"fetch {category}"
        ticket = self._ticket(category)
        try:
            descriptors = await fetch()
        except SourceError as exc:
            self._sink.publish(exc, context=context)
            return False
        if not self._is_current(ticket):
            log_stale_result(ticket.catalog.session_id, context)
            return False
        ticket.catalog.ingest(descriptors, category)
        return True

    async def _mutate(self, category: Category, action: Fetch, *, context: str) -> bool:
        ticket = self._ticket(category)
        try:
            fresh = await action()
        except ActionError as exc:
            self._withdraw(ticket)
            self._sink.publish(exc, context=context)
            return False
        if not self._is_current(ticket):
            log_stale_result(ticket.catalog.session_id, context)
            return False
        ticket.catalog.merge_mutation_result(category, fresh)
        return True
