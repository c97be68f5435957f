from __future__ import annotations

from typing import List

import pytest

from game_library.catalog.schemas import Game, Provider


NOVA = Provider(id="nova", name="Nova Gaming")
CROWN = Provider(id="crown", name="Crown Tables")
LIVE = Provider(id="studio-live", name="Studio Live")


def make_game(game_id: str, provider: Provider = NOVA, game_type: str = "slots", **fields) -> Game:
    fields.setdefault("title", f"Game {game_id}")
    return Game(id=game_id, provider=provider, type=game_type, **fields)


@pytest.fixture
def sample_games() -> List[Game]:
    return [
        make_game("a", NOVA, "slots", title="Pharaoh's Fortune", tags=["egyptian", "wilds"], play_count=50, rtp=96.2, is_hot=True),
        make_game("b", NOVA, "jackpot", title="Mega Galaxy", tags=["space", "progressive"], is_favorite=True, play_count=90, rtp=94.1),
        make_game("c", CROWN, "table", title="Blackjack Pro", tags=["cards"], is_favorite=True, play_count=70, rtp=99.1),
        make_game("d", CROWN, "slots", title="Olympus Thunder", tags=["greek", "multiplier"], is_new=True, play_count=10, rtp=96.0),
        make_game("e", LIVE, "live", title="Lightning Baccarat", tags=["cards", "multiplier"], play_count=30),
        make_game("f", LIVE, "live", title="Dream Wheel", tags=["wheel"], is_favorite=True, is_coming_soon=True, play_count=0, rtp=95.9),
    ]


@pytest.fixture
def game_factory():
    return make_game
