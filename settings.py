# settings.py - Environment-driven configuration

import os
from pathlib import Path

from pydantic import BaseModel, Field

from search_engine import SearchConfig

BASE_DIR = Path(__file__).resolve().parent


class AdvisorSettings(BaseModel):
    db_path: Path = Path("cards.db")
    deck_path: Path = BASE_DIR / "data" / "grixis_tinker.json"
    log_level: str = "INFO"
    logs_dir: Path = Path("logs")
    search_depth: int = Field(18, ge=0)
    line_length: int = Field(12, ge=1)

    def search_config(self) -> SearchConfig:
        return SearchConfig(depth_limit=self.search_depth, line_length=self.line_length)


def load_settings() -> AdvisorSettings:
    """Read settings from MULLIGAN_* environment variables, falling back to defaults."""
    defaults = AdvisorSettings()
    return AdvisorSettings(
        db_path=os.getenv("MULLIGAN_DB_PATH", defaults.db_path),
        deck_path=os.getenv("MULLIGAN_DECK_PATH", defaults.deck_path),
        log_level=os.getenv("MULLIGAN_LOG_LEVEL", defaults.log_level),
        logs_dir=os.getenv("MULLIGAN_LOGS_DIR", defaults.logs_dir),
        search_depth=os.getenv("MULLIGAN_SEARCH_DEPTH", defaults.search_depth),
        line_length=os.getenv("MULLIGAN_LINE_LENGTH", defaults.line_length),
    )
