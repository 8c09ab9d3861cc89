"""Chooser and sponsorship screens of the repository creation wizard.

Usage
-----
Load the chooser and favorite a template::

    from repo_creator.chooser import ChooseRepositoryView

    view = ChooseRepositoryView(templates, search, logged_in=True)
    await view.activate()
    await view.toggle_favorite(view.popular[0])
    target = view.select(view.favorites[0])
    print(target.path)

"""

from __future__ import annotations

from .routes import ROUTES, NavigationTarget, Route, RouteName, resolve
from .sponsorship import SponsorshipView
from .view import ChooseRepositoryView

__all__ = [
    "ROUTES",
    "ChooseRepositoryView",
    "NavigationTarget",
    "Route",
    "RouteName",
    "SponsorshipView",
    "resolve",
]
