"""Pure merge and projection functions over a catalog record table.

Every function here takes a table and returns a new one; the input is never
modified. :class:`~repo_creator.catalog.store.RepositoryCatalog` composes
them and swaps the result in as a single step.
"""

from __future__ import annotations

import typing as typ

from repo_creator.catalog.models import (
    Category,
    RecordTable,
    RepositoryDescriptor,
    RepositoryRecord,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def apply_ingest(
    table: RecordTable,
    incoming: cabc.Iterable[RepositoryDescriptor],
    category: Category,
) -> RecordTable:
    """OR-merge ``incoming`` into ``table`` under ``category``.

    Known repositories gain the ``category`` flag and keep every other flag
    and their position. Unknown repositories are appended, in input order,
    with only ``category`` set. Flags are never cleared here.

    Parameters
    ----------
    table
        Current catalog records keyed by identity.
    incoming
        Descriptors reported by a single data source.
    category
        Category the data source reports.

    Returns
    -------
    RecordTable
        A new table; ``table`` is left untouched.

    """
    merged = dict(table)
    for descriptor in incoming:
        existing = merged.get(descriptor)
        if existing is None:
            merged[descriptor] = RepositoryRecord.tagged(descriptor, category)
        else:
            merged[descriptor] = existing.with_flag(category, value=True)
    return merged


def apply_clear(table: RecordTable, category: Category) -> RecordTable:
    """Drop ``category`` from every record and remove orphaned records.

    A record left with no flag at all is garbage collected. Survivors keep
    their relative order.
    """
    cleared: RecordTable = {}
    for descriptor, record in table.items():
        updated = record.with_flag(category, value=False)
        if not updated.is_orphaned:
            cleared[descriptor] = updated
    return cleared


def apply_replace(
    table: RecordTable,
    incoming: cabc.Iterable[RepositoryDescriptor],
    category: Category,
) -> RecordTable:
    """Make ``incoming`` the complete membership of ``category``."""
    return apply_ingest(apply_clear(table, category), incoming, category)


def project(table: RecordTable, category: Category) -> tuple[RepositoryRecord, ...]:
    """Return the records flagged for ``category`` in insertion order."""
    return tuple(record for record in table.values() if record.has(category))
