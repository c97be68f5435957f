# game_library/main.py
import logging
from typing import Iterable, Optional

from fastapi import FastAPI

from .catalog import catalog_router
from .catalog.schemas import Game
from .catalog.store import GameStore
from .config import CatalogSettings
from .storage import load_games


logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[CatalogSettings] = None,
    games: Optional[Iterable[Game]] = None,
) -> FastAPI:
    """Build the application and the store it owns.

    ``games`` overrides the fixture file, which keeps tests isolated from
    the bundled data and from each other.
    """
    settings = settings or CatalogSettings.from_env()
    logging.getLogger("game_library").setLevel(settings.log_level)

    if games is None:
        games = load_games(settings.data_file)
    store = GameStore(games)
    logger.info("Game store ready with %d games", len(store))

    app = FastAPI(
        title="Game Library",
        description=(
            "Catalogue de jeux avec filtres combinés (fournisseur, type, "
            "favoris, recherche) et pagination."
        ),
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.store = store

    # 🔹 Route de base pour tester rapidement
    @app.get("/")
    def health_check():
        return {"status": "ok", "games": len(app.state.store)}

    app.include_router(catalog_router)
    return app


logging.basicConfig()
app = create_app()
