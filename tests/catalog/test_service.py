from __future__ import annotations

from typing import List

from game_library.catalog.schemas import Game, GameFilters
from game_library.catalog.service import list_favorites, list_games, sort_games
from game_library.catalog.store import GameStore


def test_sort_orders(sample_games: List[Game], game_factory) -> None:
    assert [g.id for g in sort_games(sample_games, "popular")] == ["b", "c", "a", "e", "d", "f"]
    assert [g.id for g in sort_games(sample_games, "az")] == ["c", "f", "e", "b", "d", "a"]
    assert [g.id for g in sort_games(sample_games, "za")] == ["a", "d", "b", "e", "f", "c"]
    # games without RTP sort as 0 and keep query order among ties
    assert [g.id for g in sort_games(sample_games, "rating")] == ["c", "a", "d", "f", "b", "e"]
    assert [g.id for g in sort_games(sample_games, "unknown")] == [g.id for g in sample_games]

    dated = [
        game_factory("old", release_date="2019-01-01"),
        game_factory("none"),
        game_factory("recent", release_date="2024-06-30"),
    ]
    assert [g.id for g in sort_games(dated, "new")] == ["recent", "old", "none"]


def test_sort_does_not_modify_input(sample_games: List[Game]) -> None:
    ids = [g.id for g in sample_games]
    sort_games(sample_games, "az")
    assert [g.id for g in sample_games] == ids


def test_list_games_filters_sorts_then_paginates(sample_games: List[Game]) -> None:
    store = GameStore(sample_games)

    result = list_games(store, GameFilters(types=["slots", "live"]), sort="popular", page=2, page_size=2)

    # slots/live by play count: a(50), e(30), d(10), f(0)
    assert [g.id for g in result.data] == ["d", "f"]
    assert result.pagination.total == 4
    assert result.pagination.page == 2
    assert result.pagination.has_more is False
    assert result.meta["total_games"] == 6
    assert result.meta["tags"] == ["greek", "multiplier", "wheel"]
    assert "jackpot" in result.meta["types"]
    assert [p["id"] for p in result.meta["providers"]] == ["crown", "nova", "studio-live"]


def test_list_favorites_follows_toggles(sample_games: List[Game]) -> None:
    store = GameStore(sample_games)
    store.toggle_favorite("c")
    store.toggle_favorite("e")

    result = list_favorites(store, sort="az", page=1, page_size=10)

    assert [g.id for g in result.data] == ["f", "e", "b"]
    assert result.pagination.total == 3
