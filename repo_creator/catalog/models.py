"""Value types for the template repository catalog."""

from __future__ import annotations

import dataclasses
import enum


class Category(enum.StrEnum):
    """Sources a repository can be known through.

    The values match the category names used by the repo-creator API.
    """

    FAVORITE = "favorite"
    SPONSORED = "sponsored"
    POPULAR = "popular"
    SEARCH_RESULT = "searchResult"


# Record attribute carrying each category's flag.
_FLAG_FIELDS: dict[Category, str] = {
    Category.FAVORITE: "is_favorite",
    Category.SPONSORED: "is_sponsored",
    Category.POPULAR: "is_popular",
    Category.SEARCH_RESULT: "is_search_result",
}


@dataclasses.dataclass(frozen=True, slots=True, order=True)
class RepositoryDescriptor:
    """Identity of a template repository.

    Owner and name are compared case-sensitively; two descriptors are the
    same repository exactly when both fields are equal.
    """

    owner: str
    name: str

    @property
    def slug(self) -> str:
        """Return the ``owner/name`` form."""
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, slug: str) -> RepositoryDescriptor:
        """Build a descriptor from ``owner/name``.

        Raises
        ------
        ValueError
            If ``slug`` is not exactly one owner and one name joined by ``/``.

        """
        owner, sep, name = slug.partition("/")
        if not sep or not owner or not name or "/" in name:
            msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
            raise ValueError(msg)
        return cls(owner=owner, name=name)


@dataclasses.dataclass(frozen=True, slots=True)
class RepositoryRecord:
    """A repository known to the catalog and the categories it appears in.

    Records are immutable. Changing a flag produces a new record with the same
    descriptor; the catalog swaps it in at the original position.
    """

    descriptor: RepositoryDescriptor
    is_favorite: bool = False
    is_sponsored: bool = False
    is_popular: bool = False
    is_search_result: bool = False

    @classmethod
    def tagged(
        cls, descriptor: RepositoryDescriptor, category: Category
    ) -> RepositoryRecord:
        """Create a record carrying only ``category``."""
        return cls(descriptor, **{_FLAG_FIELDS[category]: True})

    @property
    def owner(self) -> str:
        """Repository owner."""
        return self.descriptor.owner

    @property
    def name(self) -> str:
        """Repository name."""
        return self.descriptor.name

    @property
    def slug(self) -> str:
        """Return the ``owner/name`` form."""
        return self.descriptor.slug

    def has(self, category: Category) -> bool:
        """Return whether the record is flagged for ``category``."""
        return getattr(self, _FLAG_FIELDS[category])

    def with_flag(self, category: Category, *, value: bool) -> RepositoryRecord:
        """Return a copy with ``category`` set to ``value``."""
        if self.has(category) is value:
            return self
        return dataclasses.replace(self, **{_FLAG_FIELDS[category]: value})

    @property
    def categories(self) -> frozenset[Category]:
        """Categories this record is flagged for."""
        return frozenset(category for category in Category if self.has(category))

    @property
    def is_orphaned(self) -> bool:
        """True when no category flag is set."""
        return not any(self.has(category) for category in Category)


type RecordTable = dict[RepositoryDescriptor, RepositoryRecord]


@dataclasses.dataclass(frozen=True, slots=True)
class CatalogSnapshot:
    """Point-in-time copy of a catalog's records and projections.

    Snapshots compare equal exactly when the catalogs held the same records in
    the same order, which is what tests and the CLI rely on.
    """

    session_id: str
    records: tuple[RepositoryRecord, ...]
    favorites: tuple[RepositoryDescriptor, ...]
    sponsored: tuple[RepositoryDescriptor, ...]
    popular: tuple[RepositoryDescriptor, ...]
    search_results: tuple[RepositoryDescriptor, ...]

    def projection(self, category: Category) -> tuple[RepositoryDescriptor, ...]:
        """Return the descriptors captured for ``category``."""
        return {
            Category.FAVORITE: self.favorites,
            Category.SPONSORED: self.sponsored,
            Category.POPULAR: self.popular,
            Category.SEARCH_RESULT: self.search_results,
        }[category]


def as_category(value: Category | str) -> Category:
    """Coerce a category name into :class:`Category`.

    Raises
    ------
    ValueError
        If ``value`` is not a known category.

    """
    return value if isinstance(value, Category) else Category(value)


def as_descriptor(
    value: RepositoryDescriptor | RepositoryRecord,
) -> RepositoryDescriptor:
    """Return the identity of a descriptor or record."""
    if isinstance(value, RepositoryRecord):
        return value.descriptor
    return value


__all__ = [
    "CatalogSnapshot",
    "Category",
    "RecordTable",
    "RepositoryDescriptor",
    "RepositoryRecord",
    "as_category",
    "as_descriptor",
]