"""Catalog of template repositories gathered from several sources.

A chooser session learns about template repositories from four places:
search results, the user's favorites, sponsored repositories and the
popularity ranking. The catalog holds each repository once, keyed by
``owner/name``, remembers which of those categories reported it, and exposes
one ordered projection per category.

Usage
-----
Merge results as they arrive::

    from repo_creator.catalog import Category, RepositoryCatalog
    from repo_creator.catalog import RepositoryDescriptor as Repo

    catalog = RepositoryCatalog()
    catalog.ingest([Repo("acme", "starter")], Category.POPULAR)
    catalog.ingest([Repo("acme", "starter")], Category.FAVORITE)
    assert catalog.favorites == catalog.popular

Replace a category with a server's list after a mutation::

    catalog.merge_mutation_result(Category.FAVORITE, [])

"""

from repo_creator.catalog.errors import CatalogDiscardedError, CatalogError
from repo_creator.catalog.merge import apply_clear, apply_ingest, apply_replace, project
from repo_creator.catalog.models import (
    CatalogSnapshot,
    Category,
    RecordTable,
    RepositoryDescriptor,
    RepositoryRecord,
)
from repo_creator.catalog.store import RepositoryCatalog

__all__ = [
    "CatalogDiscardedError",
    "CatalogError",
    "CatalogSnapshot",
    "Category",
    "RecordTable",
    "RepositoryCatalog",
    "RepositoryDescriptor",
    "RepositoryRecord",
    "apply_clear",
    "apply_ingest",
    "apply_replace",
    "project",
]
