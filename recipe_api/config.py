from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


@dataclass(frozen=True)
class RecipeApiConfig:
    data_path: str = os.getenv("RECIPES_DATA_PATH", "")
    default_page_size: int = int(os.getenv("RECIPES_PAGE_SIZE", "10"))
    max_page_size: int = int(os.getenv("RECIPES_MAX_PAGE_SIZE", "100"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def store_path(self) -> Path | None:
        """File backing the recipe store, or ``None`` to keep it in memory."""
        return Path(self.data_path) if self.data_path else None


DEFAULT_CONFIG = RecipeApiConfig()
