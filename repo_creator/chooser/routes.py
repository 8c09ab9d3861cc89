"""Route table for the repository creation wizard.

Views never navigate themselves; they hand back a :class:`NavigationTarget`
and the caller routes to ``target.path``.
"""

from __future__ import annotations

import dataclasses
import enum
import urllib.parse

from repo_creator.catalog.models import RepositoryDescriptor


class RouteName(enum.StrEnum):
    """Screens of the wizard."""

    CHOOSE = "choose"
    NAME = "name"
    REPLACEMENTS = "replacements"


@dataclasses.dataclass(frozen=True, slots=True)
class Route:
    """A wizard screen and the path patterns that reach it."""

    name: RouteName
    patterns: tuple[str, ...]
    title: str


ROUTES: tuple[Route, ...] = (
    Route(RouteName.CHOOSE, ("", "choose"), "Choose a Template"),
    Route(RouteName.NAME, ("name/{owner}/{name}",), "Choose a Name"),
    Route(
        RouteName.REPLACEMENTS,
        ("replacements/{template_owner}/{template_name}/{destination_name}",),
        "Replacements",
    ),
)


@dataclasses.dataclass(frozen=True, slots=True)
class NavigationTarget:
    """Where to go after a repository has been picked."""

    route: RouteName
    repository: RepositoryDescriptor
    path: str


def _segment(value: str) -> str:
    if not value:
        msg = "Route segments must be non-empty"
        raise ValueError(msg)
    return urllib.parse.quote(value, safe="")


def name_path(owner: str, name: str) -> str:
    """Return the path of the naming screen for a template."""
    return f"name/{_segment(owner)}/{_segment(name)}"


def replacements_path(
    template_owner: str, template_name: str, destination_name: str
) -> str:
    """Return the path of the replacements screen."""
    return (
        f"replacements/{_segment(template_owner)}/{_segment(template_name)}/"
        f"{_segment(destination_name)}"
    )


def name_target(repository: RepositoryDescriptor) -> NavigationTarget:
    """Return the target that names a new repository from ``repository``."""
    return NavigationTarget(
        route=RouteName.NAME,
        repository=repository,
        path=name_path(repository.owner, repository.name),
    )


def resolve(path: str) -> tuple[RouteName, dict[str, str]] | None:
    """Match ``path`` against :data:`ROUTES`.

    Returns the route name and its decoded parameters, or ``None`` when no
    route matches.
    """
    parts = path.strip("/").split("/") if path.strip("/") else [""]
    for route in ROUTES:
        for pattern in route.patterns:
            params = _match(pattern.split("/") if pattern else [""], parts)
            if params is not None:
                return route.name, params
    return None


def _match(pattern: list[str], parts: list[str]) -> dict[str, str] | None:
    if len(pattern) != len(parts):
        return None
    params: dict[str, str] = {}
    for expected, actual in zip(pattern, parts, strict=True):
        if expected.startswith("{") and expected.endswith("}"):
            if not actual:
                return None
            params[expected[1:-1]] = urllib.parse.unquote(actual)
        elif expected != actual:
            return None
    return params
