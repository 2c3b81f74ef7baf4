"""Runtime configuration read from the environment."""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
import logging
import os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


@dataclass
class Settings:
    """
    Arena settings.

    data_dir=None keeps everything in memory (nothing survives a restart).
    """
    env: str = "development"
    data_dir: Path | None = Path("data")
    default_game: str = "chess"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    @property
    def database_path(self) -> Path | None:
        if self.data_dir is None:
            return None
        return self.data_dir / "db.json"

    @classmethod
    def from_env(cls) -> Settings:
        data_dir = os.getenv("MOLTGAMES_DATA_DIR", "data")
        return cls(
            env=os.getenv("MOLTGAMES_ENV", "development"),
            data_dir=Path(data_dir) if data_dir else None,
            default_game=os.getenv("MOLTGAMES_DEFAULT_GAME", "chess"),
            allowed_origins=os.getenv("ALLOWED_ORIGINS", "*").split(","),
            log_level=os.getenv("MOLTGAMES_LOG_LEVEL", "INFO").upper(),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
