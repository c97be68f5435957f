"""
Catalog package for the game library API.

The ``store`` module holds the indexed in-memory game store, the
``pagination`` module slices ordered results into pages, and
``service`` composes the two with sorting. ``router`` exposes them as
a thin REST layer: filtering by provider, type, favourites and text,
sorting and pagination.
"""

from .router import router as catalog_router  # noqa: F401
