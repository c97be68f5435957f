# game_library/storage.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import ValidationError

from .catalog.schemas import Game


logger = logging.getLogger(__name__)


def _parse_entry(entry: Dict[str, Any]) -> Game:
    # Fixtures may list tags with stray case/whitespace; index on the clean form.
    tags = entry.get("tags") or []
    if isinstance(tags, list):
        entry = {**entry, "tags": [str(t).strip().lower() for t in tags if str(t).strip()]}
    return Game.model_validate(entry)


def load_games(path: Union[str, Path]) -> List[Game]:
    """Load the initial game list from a JSON fixture.

    A missing or unreadable file yields an empty catalogue; entries that
    fail validation are skipped. Both cases are logged.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        logger.warning("Game fixture %s not found, starting with an empty catalogue", path)
        return []
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Could not read game fixture %s: %s", path, exc)
        return []

    if isinstance(raw, dict):
        raw = raw.get("games", [])
    if not isinstance(raw, list):
        logger.error("Game fixture %s must hold a list of games", path)
        return []

    games: List[Game] = []
    for position, entry in enumerate(raw):
        if not isinstance(entry, dict):
            logger.warning("Skipping entry %d in %s: not an object", position, path)
            continue
        try:
            games.append(_parse_entry(entry))
        except ValidationError as exc:
            logger.warning(
                "Skipping entry %d (%s) in %s: %d validation error(s)",
                position,
                entry.get("id", "?"),
                path,
                exc.error_count(),
            )
    logger.info("Loaded %d games from %s", len(games), path)
    return games
