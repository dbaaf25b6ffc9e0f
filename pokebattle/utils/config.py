"""Configuration management for PokeBattle."""

import os
from pathlib import Path

from pydantic import BaseModel


class Config(BaseModel):
    """Application configuration.

    Built once at startup and passed to whatever needs it (store,
    service, app factory, CLI). There is no module-level instance.
    """

    # Paths
    data_dir: Path = Path.home() / ".pokebattle"

    # Persistence
    database_url: str = ""  # Empty means sqlite under data_dir
    echo_sql: bool = False

    # Battle processing
    max_tick_iterations: int = 100
    decision_timeout_seconds: float = 10.0

    @property
    def resolved_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.data_dir / 'battles.db'}"

    def ensure_dirs(self) -> None:
        """Create necessary directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_env(cls) -> "Config":
        """Read overrides from POKEBATTLE_* environment variables."""
        values: dict = {}
        if os.getenv("POKEBATTLE_DATA_DIR"):
            values["data_dir"] = Path(os.environ["POKEBATTLE_DATA_DIR"])
        if os.getenv("POKEBATTLE_DATABASE_URL"):
            values["database_url"] = os.environ["POKEBATTLE_DATABASE_URL"]
        if os.getenv("POKEBATTLE_MAX_TICK_ITERATIONS"):
            values["max_tick_iterations"] = os.environ["POKEBATTLE_MAX_TICK_ITERATIONS"]
        if os.getenv("POKEBATTLE_DECISION_TIMEOUT"):
            values["decision_timeout_seconds"] = os.environ["POKEBATTLE_DECISION_TIMEOUT"]
        return cls(**values)
