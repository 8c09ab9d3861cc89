"""repo-creator: pick a template repository to sponsor and clone."""

from __future__ import annotations

__version__ = "0.1.0"
