"""
Catalogue use cases composed from the store and the pagination module.

The store filters, this module sorts, and ``pagination.paginate``
slices. Keeping sorting here lets the store stay agnostic of the many
orderings the front-end may ask for.
"""

from __future__ import annotations

from typing import List, Optional

from .pagination import paginate
from .schemas import GAME_TYPES, Game, GameFilters, PaginatedResponse
from .store import GameStore


def _norm(s: Optional[str]) -> str:
    return (s or "").strip().lower()


def sort_games(games: List[Game], sort: Optional[str] = "popular") -> List[Game]:
    """Return a sorted copy of ``games``.

    Parameters
    ----------
    games : List[Game]
        Games in query order.
    sort : str
        One of 'popular' (play count, highest first), 'new' (release
        date, newest first), 'az', 'za' or 'rating' (RTP, highest
        first). Any other value keeps the incoming order.

    Returns
    -------
    List[Game]
        A new list; the input is not modified. Python's sort is stable,
        so ties keep their query order.
    """
    items = list(games)
    if sort == "popular":
        items.sort(key=lambda g: g.play_count, reverse=True)
    elif sort == "new":
        items.sort(key=lambda g: g.release_date or "", reverse=True)
    elif sort == "az":
        items.sort(key=lambda g: (_norm(g.title), g.id))
    elif sort == "za":
        items.sort(key=lambda g: (_norm(g.title), g.id), reverse=True)
    elif sort == "rating":
        items.sort(key=lambda g: g.rtp if g.rtp is not None else 0.0, reverse=True)
    return items


def list_games(
    store: GameStore,
    filters: Optional[GameFilters] = None,
    sort: Optional[str] = "popular",
    page: Optional[int] = 1,
    page_size: Optional[int] = 12,
) -> PaginatedResponse:
    """Filter, sort and paginate games.

    The ``meta`` block carries what a filter panel needs: every known
    provider, the closed list of types, the tags present on the returned
    page and the size of the whole catalogue.
    """
    matched = store.query(filters)
    ordered = sort_games(matched, sort)
    result = paginate(ordered, page, page_size)

    page_tags = sorted({t for g in result.data for t in g.tags})
    result.meta = {
        "providers": [p.model_dump() for p in store.providers()],
        "types": list(GAME_TYPES),
        "tags": page_tags,
        "total_games": len(store),
    }
    return result


def list_favorites(
    store: GameStore,
    sort: Optional[str] = "popular",
    page: Optional[int] = 1,
    page_size: Optional[int] = 12,
) -> PaginatedResponse:
    return paginate(sort_games(store.favorites(), sort), page, page_size)


def list_tag_games(
    store: GameStore,
    tag: str,
    sort: Optional[str] = "popular",
    page: Optional[int] = 1,
    page_size: Optional[int] = 12,
) -> PaginatedResponse:
    """Games carrying exactly ``tag``; unlike the ``tags`` filter, no substring match."""
    return paginate(sort_games(store.by_tag(tag), sort), page, page_size)
