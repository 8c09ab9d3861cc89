"""In-memory catalog of template repositories for one chooser session."""

from __future__ import annotations

import typing as typ
import uuid

from repo_creator.catalog.errors import CatalogDiscardedError
from repo_creator.catalog.merge import apply_clear, apply_ingest, apply_replace, project
from repo_creator.catalog.models import (
    CatalogSnapshot,
    Category,
    RecordTable,
    RepositoryDescriptor,
    RepositoryRecord,
    as_category,
)
from repo_creator.logging import get_logger, log_debug

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = get_logger(__name__)


class RepositoryCatalog:
    """Deduplicated set of repositories plus their four category projections.

    Records are keyed by ``(owner, name)``; the same repository reported by
    several sources is held once with the union of its category flags. Every
    mutation swaps in a new record table and recomputes all projections, so
    readers never observe a half-applied update.

    The catalog never awaits. Under asyncio each call runs to completion
    before the next starts; callers with real threads must serialise
    mutations themselves.

    Parameters
    ----------
    session_id:
        Identifier of the owning view session. A random one is generated
        when omitted.

    """

    def __init__(self, session_id: str | None = None) -> None:
        """Create an empty catalog for a new session."""
        self.session_id = session_id or uuid.uuid4().hex
        self._records: RecordTable = {}
        self._projections: dict[Category, tuple[RepositoryRecord, ...]] = {}
        self._discarded = False
        self._refresh()

    # -- mutations ---------------------------------------------------------

    def ingest(
        self,
        incoming: cabc.Iterable[RepositoryDescriptor],
        category: Category | str,
    ) -> None:
        """OR-merge repositories reported by one source under ``category``.

        Raises
        ------
        CatalogDiscardedError
            If the owning view has already discarded this catalog.

        """
        kind = as_category(category)
        descriptors = tuple(incoming)
        self._commit(apply_ingest(self._records, descriptors, kind))
        log_debug(
            logger,
            "catalog=%s ingested %d %s repositories (size=%d)",
            self.session_id,
            len(descriptors),
            kind,
            len(self._records),
        )

    def clear_category(self, category: Category | str) -> None:
        """Remove ``category`` from every record and drop orphaned records."""
        kind = as_category(category)
        before = len(self._records)
        self._commit(apply_clear(self._records, kind))
        log_debug(
            logger,
            "catalog=%s cleared %s (removed=%d size=%d)",
            self.session_id,
            kind,
            before - len(self._records),
            len(self._records),
        )

    def merge_mutation_result(
        self,
        category: Category | str,
        fresh: cabc.Iterable[RepositoryDescriptor],
    ) -> None:
        """Replace ``category`` membership with a server's authoritative list.

        Equivalent to :meth:`clear_category` followed by :meth:`ingest`, but
        committed as one update.
        """
        kind = as_category(category)
        descriptors = tuple(fresh)
        self._commit(apply_replace(self._records, descriptors, kind))
        log_debug(
            logger,
            "catalog=%s replaced %s with %d repositories (size=%d)",
            self.session_id,
            kind,
            len(descriptors),
            len(self._records),
        )

    def discard(self) -> None:
        """Mark the catalog as abandoned by its view.

        Later mutations raise :class:`CatalogDiscardedError`; reads keep
        returning the final state.
        """
        self._discarded = True

    @property
    def is_discarded(self) -> bool:
        """Whether :meth:`discard` has been called."""
        return self._discarded

    def _commit(self, records: RecordTable) -> None:
        if self._discarded:
            raise CatalogDiscardedError(self.session_id)
        self._records = records
        self._refresh()

    def _refresh(self) -> None:
        self._projections = {
            category: project(self._records, category) for category in Category
        }

    # -- reads -------------------------------------------------------------

    def projection(self, category: Category | str) -> tuple[RepositoryRecord, ...]:
        """Return the records flagged for ``category`` in insertion order."""
        return self._projections[as_category(category)]

    @property
    def favorites(self) -> tuple[RepositoryRecord, ...]:
        """Repositories the signed-in user has marked as favorite."""
        return self._projections[Category.FAVORITE]

    @property
    def sponsored(self) -> tuple[RepositoryRecord, ...]:
        """Repositories that have been sponsored."""
        return self._projections[Category.SPONSORED]

    @property
    def popular(self) -> tuple[RepositoryRecord, ...]:
        """Repositories ranked as popular templates."""
        return self._projections[Category.POPULAR]

    @property
    def search_results(self) -> tuple[RepositoryRecord, ...]:
        """Repositories matching the latest search."""
        return self._projections[Category.SEARCH_RESULT]

    @property
    def records(self) -> tuple[RepositoryRecord, ...]:
        """Every record in insertion order."""
        return tuple(self._records.values())

    def get(self, owner: str, name: str) -> RepositoryRecord | None:
        """Return the record for ``owner/name`` if the catalog holds it."""
        return self._records.get(RepositoryDescriptor(owner, name))

    def snapshot(self) -> CatalogSnapshot:
        """Capture the current records and projections."""

        def ids(category: Category) -> tuple[RepositoryDescriptor, ...]:
            return tuple(record.descriptor for record in self._projections[category])

        return CatalogSnapshot(
            session_id=self.session_id,
            records=self.records,
            favorites=ids(Category.FAVORITE),
            sponsored=ids(Category.SPONSORED),
            popular=ids(Category.POPULAR),
            search_results=ids(Category.SEARCH_RESULT),
        )

    def __len__(self) -> int:
        """Return the number of records held."""
        return len(self._records)

    def __contains__(self, item: object) -> bool:
        """Return whether a descriptor or record's identity is held."""
        if isinstance(item, RepositoryRecord):
            item = item.descriptor
        return item in self._records

    def __iter__(self) -> cabc.Iterator[RepositoryRecord]:
        """Iterate over records in insertion order."""
        return iter(tuple(self._records.values()))

    def __repr__(self) -> str:
        """Summarise the catalog for debugging."""
        return (
            f"RepositoryCatalog(session_id={self.session_id!r}, "
            f"records={len(self._records)}, discarded={self._discarded})"
        )
