from __future__ import annotations

import logging
from typing import List

from game_library.catalog.schemas import Game
from game_library.config import CatalogSettings
from game_library.main import create_app


def test_each_app_applies_its_log_level(sample_games: List[Game]) -> None:
    package_logger = logging.getLogger("game_library")
    previous = package_logger.level
    try:
        create_app(settings=CatalogSettings(log_level="DEBUG"), games=sample_games)
        assert package_logger.level == logging.DEBUG
        assert logging.getLogger("game_library.catalog.store").isEnabledFor(logging.DEBUG)

        create_app(settings=CatalogSettings(log_level="WARNING"), games=sample_games)
        assert package_logger.level == logging.WARNING
        assert not logging.getLogger("game_library.catalog.store").isEnabledFor(logging.INFO)
    finally:
        package_logger.setLevel(previous)
