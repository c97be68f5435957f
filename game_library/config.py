"""Runtime configuration for the game library service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional


# Pagination bounds shared by the pagination module and the router.
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 12
MIN_PAGE = 1
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 50

DEFAULT_DATA_FILE = Path(__file__).resolve().parent / "data" / "games.json"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class CatalogSettings:
    """Validated settings used by the composition root."""

    data_file: Path = DEFAULT_DATA_FILE
    default_page_size: int = DEFAULT_PAGE_SIZE
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CatalogSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        data_file_raw = source.get("GAME_LIBRARY_DATA_FILE", "").strip()
        page_size_raw = source.get("GAME_LIBRARY_PAGE_SIZE", "").strip()
        log_level = source.get("GAME_LIBRARY_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()

        data_file = Path(data_file_raw) if data_file_raw else DEFAULT_DATA_FILE

        page_size = DEFAULT_PAGE_SIZE
        if page_size_raw:
            try:
                page_size = int(page_size_raw)
            except ValueError:
                raise ValueError(
                    f"GAME_LIBRARY_PAGE_SIZE must be an integer, got {page_size_raw!r}"
                ) from None
            if not MIN_PAGE_SIZE <= page_size <= MAX_PAGE_SIZE:
                raise ValueError(
                    f"GAME_LIBRARY_PAGE_SIZE must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}"
                )

        if not log_level:
            log_level = DEFAULT_LOG_LEVEL
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"GAME_LIBRARY_LOG_LEVEL is not a valid level: {log_level}")

        return cls(data_file=data_file, default_page_size=page_size, log_level=log_level)
