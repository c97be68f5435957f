"""
Indexed in-memory store for the game catalogue.

``GameStore`` owns the canonical ``id -> Game`` map and three secondary
indexes (provider id, game type, favorite flag). Compound filters are
answered by intersecting index buckets first and only then scanning the
narrowed candidates for substring and attribute predicates, so a query
that names a provider never touches games from other providers.

The store is the sole owner of its records. Everything handed in is
copied, everything handed out is a copy, and the favorite flag can only
change through the favorite methods (toggle, set, clear, import). A
single re-entrant lock serialises access so the multi-bucket updates
stay atomic when FastAPI runs handlers on its worker threads.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Union

from .schemas import (
    CatalogStats,
    Game,
    GameFilters,
    Provider,
    ProviderCount,
    ProviderSummary,
    TagCount,
    TypeCount,
)


logger = logging.getLogger(__name__)


class _Unfiltered:
    """Working-set marker meaning "every record", without building the set."""

    _instance: Optional["_Unfiltered"] = None

    def __new__(cls) -> "_Unfiltered":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNFILTERED"


UNFILTERED = _Unfiltered()

WorkingSet = Union[_Unfiltered, Set[str]]


def _norm(s: Optional[str]) -> str:
    return (s or "").strip().lower()


def _narrow(working: WorkingSet, ids: Set[str]) -> Set[str]:
    if working is UNFILTERED:
        return ids
    return working & ids


def _matches_text(game: Game, needle: str, search_type: str = "all") -> bool:
    """Case-insensitive containment; ``needle`` must already be normalised."""
    if search_type in ("all", "games") and needle in game.title.lower():
        return True
    if search_type in ("all", "tags") and any(needle in t.lower() for t in game.tags):
        return True
    if search_type in ("all", "providers") and needle in game.provider.name.lower():
        return True
    return False


def _matches_attributes(game: Game, filters: GameFilters, wanted_tags: List[str]) -> bool:
    if filters.is_new and not game.is_new:
        return False
    if filters.is_hot and not game.is_hot:
        return False
    if filters.is_coming_soon and not game.is_coming_soon:
        return False
    if wanted_tags and not any(w in t.lower() for t in game.tags for w in wanted_tags):
        return False
    if filters.min_rtp is not None or filters.max_rtp is not None:
        if game.rtp is None:
            return False
        if filters.min_rtp is not None and game.rtp < filters.min_rtp:
            return False
        if filters.max_rtp is not None and game.rtp > filters.max_rtp:
            return False
    return True


class GameStore:
    """Games plus provider, type and favorite indexes.

    Parameters
    ----------
    games : Iterable[Game]
        Initial records. Duplicated ids behave like repeated ``add``
        calls: the last one wins.
    """

    def __init__(self, games: Iterable[Game] = ()) -> None:
        self._lock = threading.RLock()
        self._games: Dict[str, Game] = {}
        self._order: Dict[str, int] = {}
        self._by_provider: Dict[str, Set[str]] = {}
        self._by_type: Dict[str, Set[str]] = {}
        self._favorites: Set[str] = set()
        self._providers: Dict[str, Provider] = {}
        self._seq = itertools.count()
        for game in games:
            self.add(game)
        logger.debug("Indexed %d games across %d providers", len(self._games), len(self._by_provider))

    # -- mutation ---------------------------------------------------------

    def add(self, game: Game) -> Game:
        """Insert ``game``, replacing any record with the same id.

        The replaced record is fully unindexed before the new one is
        indexed, and the game moves to the end of the insertion order.
        Returns a snapshot of the stored record.
        """
        if not isinstance(game, Game):
            raise TypeError(f"GameStore.add expects a Game, got {type(game).__name__}")
        stored = game.model_copy(deep=True)
        with self._lock:
            if stored.id in self._games:
                logger.info("Replacing existing game %s", stored.id)
                self._unindex(stored.id)
            self._games[stored.id] = stored
            self._order[stored.id] = next(self._seq)
            self._by_provider.setdefault(stored.provider.id, set()).add(stored.id)
            self._by_type.setdefault(stored.type, set()).add(stored.id)
            if stored.is_favorite:
                self._favorites.add(stored.id)
            self._providers[stored.provider.id] = stored.provider
        return stored.model_copy(deep=True)

    def remove(self, game_id: str) -> bool:
        """Remove a game. Returns ``False`` when the id is unknown."""
        with self._lock:
            if game_id not in self._games:
                return False
            self._unindex(game_id)
        return True

    def toggle_favorite(self, game_id: str) -> Optional[bool]:
        """Flip the favorite flag and return its new value.

        ``None`` means the id is unknown; nothing is changed in that case.
        """
        with self._lock:
            game = self._games.get(game_id)
            if game is None:
                return None
            return self._set_flag(game_id, not game.is_favorite)

    def set_favorite(self, game_id: str, value: bool) -> Optional[bool]:
        """Force the favorite flag to ``value``; ``None`` for an unknown id."""
        with self._lock:
            if game_id not in self._games:
                return None
            return self._set_flag(game_id, bool(value))

    def clear_favorites(self) -> int:
        """Unflag every favorite. Returns how many games were unflagged."""
        with self._lock:
            cleared = list(self._favorites)
            for game_id in cleared:
                self._set_flag(game_id, False)
        logger.info("Cleared %d favourites", len(cleared))
        return len(cleared)

    def import_favorites(self, game_ids: Iterable[str]) -> List[str]:
        """Replace the favorite set with ``game_ids``.

        Unknown ids are ignored. Returns the ids that ended up flagged, in
        insertion order.
        """
        if isinstance(game_ids, str):
            raise TypeError("GameStore.import_favorites expects a collection of ids")
        wanted = set(game_ids)
        with self._lock:
            known = {i for i in wanted if i in self._games}
            for game_id in list(self._favorites - known):
                self._set_flag(game_id, False)
            for game_id in known - self._favorites:
                self._set_flag(game_id, True)
            imported = sorted(known, key=self._order.__getitem__)
        if len(known) < len(wanted):
            logger.warning("Ignored %d unknown ids in favourites import", len(wanted) - len(known))
        return imported

    def _set_flag(self, game_id: str, value: bool) -> bool:
        # caller holds the lock and has checked that game_id is present
        game = self._games[game_id]
        if game.is_favorite != value:
            self._games[game_id] = game.model_copy(update={"is_favorite": value})
        if value:
            self._favorites.add(game_id)
        else:
            self._favorites.discard(game_id)
        return value

    def clear(self) -> None:
        with self._lock:
            self._games.clear()
            self._order.clear()
            self._by_provider.clear()
            self._by_type.clear()
            self._favorites.clear()
            self._providers.clear()

    def _unindex(self, game_id: str) -> None:
        # caller holds the lock and has checked that game_id is present
        game = self._games.pop(game_id)
        del self._order[game_id]
        self._discard(self._by_provider, game.provider.id, game_id)
        self._discard(self._by_type, game.type, game_id)
        self._favorites.discard(game_id)
        remaining = self._by_provider.get(game.provider.id)
        if remaining is None:
            self._providers.pop(game.provider.id, None)
        else:
            # the provider name follows the most recently added game still present
            latest = max(remaining, key=self._order.__getitem__)
            self._providers[game.provider.id] = self._games[latest].provider

    @staticmethod
    def _discard(index: Dict[str, Set[str]], key: str, game_id: str) -> None:
        bucket = index.get(key)
        if bucket is None:
            return
        bucket.discard(game_id)
        if not bucket:
            del index[key]

    # -- lookup -----------------------------------------------------------

    def __len__(self) -> int:
        return len(self._games)

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._games

    def get(self, game_id: str) -> Optional[Game]:
        with self._lock:
            game = self._games.get(game_id)
            return game.model_copy(deep=True) if game is not None else None

    def all(self) -> List[Game]:
        with self._lock:
            return [g.model_copy(deep=True) for g in self._games.values()]

    def by_provider(self, provider_id: str) -> List[Game]:
        with self._lock:
            return self._materialize(self._by_provider.get(provider_id, set()))

    def by_type(self, game_type: str) -> List[Game]:
        with self._lock:
            return self._materialize(self._by_type.get(game_type, set()))

    def favorites(self) -> List[Game]:
        with self._lock:
            return self._materialize(self._favorites)

    def by_tag(self, tag: str) -> List[Game]:
        """Games carrying exactly ``tag`` (case-insensitive), in insertion order."""
        wanted = _norm(tag)
        if not wanted:
            return []
        with self._lock:
            ids = [i for i, g in self._games.items() if any(_norm(t) == wanted for t in g.tags)]
            return self._materialize(ids)

    def _materialize(self, ids: Iterable[str]) -> List[Game]:
        # insertion order, so results are stable across calls
        ordered = sorted(ids, key=self._order.__getitem__)
        return [self._games[i].model_copy(deep=True) for i in ordered]

    def search(self, text: str) -> List[Game]:
        """Full scan for games whose title, tags or provider name contain ``text``."""
        if text is None:
            raise TypeError("GameStore.search requires a string")
        needle = _norm(text)
        with self._lock:
            return [
                g.model_copy(deep=True)
                for g in self._games.values()
                if _matches_text(g, needle)
            ]

    # -- compound query ---------------------------------------------------

    def query(self, filters: Union[GameFilters, Mapping[str, Any], None] = None) -> List[Game]:
        """Return games matching every supplied filter, in insertion order.

        Index-backed filters (favorites, providers, types) are intersected
        first, smallest seed first. Text and attribute predicates are then
        evaluated only over the surviving candidates. The result is not
        sorted beyond insertion order.

        Parameters
        ----------
        filters : GameFilters | Mapping | None
            ``None`` or an empty ``GameFilters`` returns every game. A
            mapping is validated into ``GameFilters``.

        Returns
        -------
        List[Game]
            Snapshots of the matching games.
        """
        if filters is None:
            filters = GameFilters()
        elif isinstance(filters, Mapping):
            filters = GameFilters.model_validate(filters)
        elif not isinstance(filters, GameFilters):
            raise TypeError(f"GameStore.query expects GameFilters, got {type(filters).__name__}")

        with self._lock:
            working: WorkingSet = UNFILTERED

            if filters.favorites_only:
                working = set(self._favorites)

            if filters.providers:
                working = _narrow(working, self._union(self._by_provider, filters.providers))

            if filters.types:
                working = _narrow(working, self._union(self._by_type, filters.types))

            if working is UNFILTERED:
                candidates = list(self._games.values())
            else:
                ordered = sorted(working, key=self._order.__getitem__)
                candidates = [self._games[i] for i in ordered]

            needle = _norm(filters.search)
            if needle:
                candidates = [g for g in candidates if _matches_text(g, needle, filters.search_type)]

            wanted_tags = [_norm(t) for t in filters.tags if _norm(t)]
            candidates = [g for g in candidates if _matches_attributes(g, filters, wanted_tags)]

            return [g.model_copy(deep=True) for g in candidates]

    @staticmethod
    def _union(index: Dict[str, Set[str]], keys: Iterable[str]) -> Set[str]:
        ids: Set[str] = set()
        for key in keys:
            ids.update(index.get(key, ()))
        return ids

    # -- aggregates -------------------------------------------------------

    def providers(self, sort: str = "name") -> List[ProviderSummary]:
        """Providers that currently have at least one game.

        ``sort`` is ``name``/``az`` (default), ``za`` or ``game_count``
        (largest first, then by name). Unknown values sort by name.
        """
        with self._lock:
            summaries = [self._summary(pid) for pid in self._providers]
        summaries.sort(key=lambda s: (_norm(s.name), s.id), reverse=(sort == "za"))
        if sort == "game_count":
            summaries.sort(key=lambda s: s.game_count, reverse=True)
        return summaries

    def get_provider(self, provider_id: str) -> Optional[ProviderSummary]:
        with self._lock:
            if provider_id not in self._providers:
                return None
            return self._summary(provider_id)

    def search_providers(self, text: str) -> List[ProviderSummary]:
        """Providers whose name or id contains ``text``, by name."""
        needle = _norm(text)
        return [
            p for p in self.providers()
            if needle in p.name.lower() or needle in p.id.lower()
        ]

    def _summary(self, provider_id: str) -> ProviderSummary:
        provider = self._providers[provider_id]
        return ProviderSummary(
            id=provider.id,
            name=provider.name,
            game_count=len(self._by_provider[provider_id]),
        )

    def tag_counts(self) -> Dict[str, int]:
        with self._lock:
            counts: Counter = Counter()
            for game in self._games.values():
                counts.update({_norm(t) for t in game.tags if _norm(t)})
        return dict(counts)

    def unique_tags(self) -> List[str]:
        return sorted(self.tag_counts())

    def top_tags(self, limit: int = 10) -> List[TagCount]:
        return self._ranked_tags()[: max(0, limit)]

    def popular_tags(self, min_games: int = 5) -> List[TagCount]:
        """Tags used by at least ``min_games`` games, most used first."""
        return [t for t in self._ranked_tags() if t.count >= min_games]

    def search_tags(self, text: str) -> List[TagCount]:
        """Tags containing ``text``, most used first."""
        needle = _norm(text)
        return [t for t in self._ranked_tags() if needle in t.tag]

    def _ranked_tags(self) -> List[TagCount]:
        ranked = sorted(self.tag_counts().items(), key=lambda kv: (-kv[1], kv[0]))
        return [TagCount(tag=tag, count=count) for tag, count in ranked]

    def stats(self) -> CatalogStats:
        with self._lock:
            return CatalogStats(
                total_games=len(self._games),
                total_favorites=len(self._favorites),
                games_by_type=[
                    TypeCount(type=t, count=len(ids)) for t, ids in self._by_type.items()
                ],
                games_by_provider=[
                    ProviderCount(provider_id=p, count=len(ids))
                    for p, ids in self._by_provider.items()
                ],
                new_games=sum(1 for g in self._games.values() if g.is_new),
                hot_games=sum(1 for g in self._games.values() if g.is_hot),
            )
