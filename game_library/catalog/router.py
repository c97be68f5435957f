"""
Route definitions for the catalogue API.

Endpoints under /api/catalog:
- GET    /games                   : list games with filters, sorting and pagination
- GET    /games/{game_id}         : get one game
- GET    /favorites               : list favourite games (paginated)
- POST   /favorites               : add, remove or toggle a game's favourite flag
- PUT    /favorites               : replace the favourite set
- DELETE /favorites               : clear every favourite
- GET    /providers               : providers with game counts (sortable, searchable)
- GET    /providers/{provider_id} : one provider with its game count
- GET    /tags                    : tags with game counts (top, popular or search)
- GET    /tags/{tag}/games        : games carrying exactly that tag (paginated)
- GET    /stats                   : index statistics

Query parameters are parsed leniently, like the page clamping: values that
do not parse fall back to their defaults instead of producing a 422.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from .pagination import to_int
from .schemas import (
    SEARCH_TYPES,
    CatalogStats,
    ClearFavoritesResponse,
    Game,
    GameFilters,
    ImportFavoritesRequest,
    ImportFavoritesResponse,
    PaginatedResponse,
    ProviderSummary,
    TagCount,
    ToggleFavoriteRequest,
    ToggleFavoriteResponse,
)
from .service import list_favorites, list_games, list_tag_games
from .store import GameStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/catalog", tags=["catalog"])

_TRUE_VALUES = {"1", "true", "yes", "on"}
DEFAULT_TAG_LIMIT = 50
MAX_TAG_LIMIT = 500
DEFAULT_POPULAR_MIN_GAMES = 5


def get_store(request: Request) -> GameStore:
    """Return the store owned by the application instance."""
    return request.app.state.store


def _page_size(request: Request, value: Optional[str]) -> int:
    # unparseable sizes use the configured default, not the library one
    return to_int(value, request.app.state.settings.default_page_size)


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUE_VALUES


def _to_float(value: Optional[str]) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _search_type(value: Optional[str]) -> str:
    value = (value or "").strip().lower()
    return value if value in SEARCH_TYPES else "all"


@router.get("/games", response_model=PaginatedResponse[Game])
def get_games(
    request: Request,
    search: Optional[str] = Query(default=None, description="Substring search"),
    search_type: Optional[str] = Query(default=None, description="all, games, providers or tags"),
    providers: Optional[str] = Query(default=None, description="Comma-separated provider ids"),
    types: Optional[str] = Query(default=None, description="Comma-separated game types"),
    tags: Optional[str] = Query(default=None, description="Comma-separated tags"),
    favorites: Optional[str] = Query(default=None, description="Only favourite games"),
    new: Optional[str] = Query(default=None, description="Only new games"),
    hot: Optional[str] = Query(default=None, description="Only hot games"),
    coming: Optional[str] = Query(default=None, description="Only coming-soon games"),
    min_rtp: Optional[str] = Query(default=None, description="Minimum RTP"),
    max_rtp: Optional[str] = Query(default=None, description="Maximum RTP"),
    sort: Optional[str] = Query(default="popular", description="popular, new, az, za or rating"),
    page: Optional[str] = Query(default=None, description="Page (1-indexed)"),
    page_size: Optional[str] = Query(default=None, description="Page size"),
    store: GameStore = Depends(get_store),
) -> PaginatedResponse:
    """
    Returns a filtered, sorted, paginated list of games.

    Out-of-range ``page``/``page_size`` values are clamped rather than
    rejected: links to a page that no longer exists land on the last one.
    An unknown ``sort`` keeps the query order and an unknown
    ``search_type`` searches every field.
    """
    filters = GameFilters(
        favorites_only=_flag(favorites),
        providers=_split_csv(providers),
        types=_split_csv(types),
        search=search,
        search_type=_search_type(search_type),
        tags=_split_csv(tags),
        is_new=_flag(new),
        is_hot=_flag(hot),
        is_coming_soon=_flag(coming),
        min_rtp=_to_float(min_rtp),
        max_rtp=_to_float(max_rtp),
    )
    return list_games(
        store,
        filters,
        sort=sort,
        page=page,
        page_size=_page_size(request, page_size),
    )


@router.get("/games/{game_id}", response_model=Game)
def get_game(game_id: str, store: GameStore = Depends(get_store)) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return game


@router.get("/favorites", response_model=PaginatedResponse[Game])
def get_favorites(
    request: Request,
    sort: Optional[str] = Query(default="popular"),
    page: Optional[str] = Query(default=None),
    page_size: Optional[str] = Query(default=None),
    store: GameStore = Depends(get_store),
) -> PaginatedResponse:
    return list_favorites(store, sort=sort, page=page, page_size=_page_size(request, page_size))


@router.post("/favorites", response_model=ToggleFavoriteResponse)
def update_favorite(
    body: ToggleFavoriteRequest,
    store: GameStore = Depends(get_store),
) -> ToggleFavoriteResponse:
    """Add, remove or (by default) toggle the favourite flag of ``body.game_id``."""
    action = (body.action or "toggle").strip().lower()
    if action == "add":
        value = store.set_favorite(body.game_id, True)
    elif action == "remove":
        value = store.set_favorite(body.game_id, False)
    else:
        value = store.toggle_favorite(body.game_id)
    if value is None:
        raise HTTPException(status_code=404, detail="Game not found")
    logger.info("Game %s favourite=%s (%s)", body.game_id, value, action)
    return ToggleFavoriteResponse(game_id=body.game_id, is_favorite=value)


@router.put("/favorites", response_model=ImportFavoritesResponse)
def import_favorites(
    body: ImportFavoritesRequest,
    store: GameStore = Depends(get_store),
) -> ImportFavoritesResponse:
    """Replace the favourite set. Unknown ids are ignored."""
    imported = store.import_favorites(body.game_ids)
    logger.info("Imported %d favourites", len(imported))
    return ImportFavoritesResponse(count=len(imported), game_ids=imported)


@router.delete("/favorites", response_model=ClearFavoritesResponse)
def clear_favorites(store: GameStore = Depends(get_store)) -> ClearFavoritesResponse:
    return ClearFavoritesResponse(cleared=store.clear_favorites())


@router.get("/providers", response_model=List[ProviderSummary])
def get_providers(
    sort: Optional[str] = Query(default="name", description="name, az, za or game_count"),
    search: Optional[str] = Query(default=None, description="Substring of the provider name or id"),
    store: GameStore = Depends(get_store),
) -> List[ProviderSummary]:
    providers = store.providers(sort=(sort or "name").strip().lower())
    if search and search.strip():
        wanted = {p.id for p in store.search_providers(search)}
        providers = [p for p in providers if p.id in wanted]
    return providers


@router.get("/providers/{provider_id}", response_model=ProviderSummary)
def get_provider(provider_id: str, store: GameStore = Depends(get_store)) -> ProviderSummary:
    provider = store.get_provider(provider_id)
    if provider is None:
        raise HTTPException(status_code=404, detail="Provider not found")
    return provider


@router.get("/tags", response_model=List[TagCount])
def get_tags(
    limit: Optional[str] = Query(default=None, description="Number of tags, most used first"),
    popular: Optional[str] = Query(default=None, description="Only tags used by min_games games"),
    min_games: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None, description="Substring of the tag"),
    store: GameStore = Depends(get_store),
) -> List[TagCount]:
    if search and search.strip():
        return store.search_tags(search)
    if _flag(popular):
        return store.popular_tags(to_int(min_games, DEFAULT_POPULAR_MIN_GAMES))
    size = min(MAX_TAG_LIMIT, max(1, to_int(limit, DEFAULT_TAG_LIMIT)))
    return store.top_tags(size)


@router.get("/tags/{tag}/games", response_model=PaginatedResponse[Game])
def get_tag_games(
    tag: str,
    request: Request,
    sort: Optional[str] = Query(default="popular"),
    page: Optional[str] = Query(default=None),
    page_size: Optional[str] = Query(default=None),
    store: GameStore = Depends(get_store),
) -> PaginatedResponse:
    return list_tag_games(store, tag, sort=sort, page=page, page_size=_page_size(request, page_size))


@router.get("/stats", response_model=CatalogStats)
def get_stats(store: GameStore = Depends(get_store)) -> CatalogStats:
    return store.stats()
