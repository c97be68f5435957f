"""
Pydantic schema definitions for the catalog module.

The ``Game`` model is the record held by the indexed store: it carries
the fields used for indexing (``provider.id``, ``type``,
``is_favorite``) along with the free-form text searched by substring
(title, tags, provider name). ``GameFilters`` is the explicit criteria
shape consumed by ``GameStore.query``. The pagination models bundle a
page of items with navigation metadata so that clients know where they
are in the result set.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field
from typing_extensions import Literal


GameType = Literal["slots", "table", "live", "instant", "jackpot"]
GAME_TYPES = ("slots", "table", "live", "instant", "jackpot")

SearchType = Literal["all", "games", "providers", "tags"]
SEARCH_TYPES = ("all", "games", "providers", "tags")
SortOption = Literal["popular", "new", "az", "za", "rating"]

T = TypeVar("T")


class Provider(BaseModel):
    """A game provider (publisher). Games reference exactly one."""

    id: str
    name: str
    slug: Optional[str] = None
    logo: Optional[str] = None


class Game(BaseModel):
    """A single game entry.

    Identity, ``provider`` and ``type`` are fixed once a game is in the
    store. ``is_favorite`` is the only mutable field and must be changed
    through ``GameStore.toggle_favorite`` so the favorites index stays
    in step. ``rtp`` is the return-to-player percentage; ``None`` when
    the provider does not publish one.
    """

    id: str
    title: str
    slug: str = ""
    thumbnail: str = ""
    description: Optional[str] = None
    provider: Provider
    type: GameType
    is_favorite: bool = False
    is_new: bool = False
    is_hot: bool = False
    is_coming_soon: bool = False
    tags: List[str] = Field(default_factory=list)
    play_count: int = 0
    # ISO date string (YYYY-MM-DD); compared lexically when sorting.
    release_date: Optional[str] = None
    rtp: Optional[float] = None


class GameFilters(BaseModel):
    """Criteria for ``GameStore.query``.

    Every field is optional. Values inside ``providers``, ``types`` and
    ``tags`` are OR-ed; distinct fields are AND-ed. ``types`` accepts any
    string so that an unknown type simply matches nothing.
    """

    favorites_only: bool = False
    providers: List[str] = Field(default_factory=list)
    types: List[str] = Field(default_factory=list)
    search: Optional[str] = None
    search_type: SearchType = "all"
    tags: List[str] = Field(default_factory=list)
    is_new: bool = False
    is_hot: bool = False
    is_coming_soon: bool = False
    min_rtp: Optional[float] = None
    max_rtp: Optional[float] = None


class ProviderSummary(BaseModel):
    id: str
    name: str
    game_count: int


class TypeCount(BaseModel):
    type: str
    count: int


class ProviderCount(BaseModel):
    provider_id: str
    count: int


class TagCount(BaseModel):
    tag: str
    count: int


class CatalogStats(BaseModel):
    """Snapshot of index sizes, computed on demand."""

    total_games: int
    total_favorites: int
    games_by_type: List[TypeCount] = Field(default_factory=list)
    games_by_provider: List[ProviderCount] = Field(default_factory=list)
    new_games: int = 0
    hot_games: int = 0


class PaginationRequest(BaseModel):
    page: Optional[int] = None
    page_size: Optional[int] = None


class PaginationInfo(BaseModel):
    """Navigation metadata for one page of results.

    ``end_index`` is inclusive; for an empty result it is ``-1`` so that
    ``end_index - start_index + 1`` is always the number of items on the
    page.
    """

    page: int
    page_size: int
    total: int
    total_pages: int
    has_more: bool
    has_previous: bool
    next_page: Optional[int] = None
    previous_page: Optional[int] = None
    start_index: int
    end_index: int


class PaginatedResponse(BaseModel, Generic[T]):
    """A page of items with its pagination metadata."""

    data: List[T]
    pagination: PaginationInfo
    meta: Optional[Dict[str, Any]] = None


class ToggleFavoriteRequest(BaseModel):
    """``action`` defaults to a toggle; ``add`` and ``remove`` are idempotent."""

    game_id: str
    action: Optional[str] = None


class ToggleFavoriteResponse(BaseModel):
    game_id: str
    is_favorite: bool


class ImportFavoritesRequest(BaseModel):
    game_ids: List[str]


class ImportFavoritesResponse(BaseModel):
    count: int
    game_ids: List[str]


class ClearFavoritesResponse(BaseModel):
    cleared: int
