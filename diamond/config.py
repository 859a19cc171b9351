"""
Simulator configuration
"""
import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name, "").strip()
    return int(value) if value else None


class Settings:
    """Settings from environment variables"""

    # Storage
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "diamond_league.db")

    # HTTP
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")

    # Simulation
    SIM_SEED: Optional[int] = _optional_int("SIM_SEED")
    DEFAULT_GAMES_PER_TEAM: int = int(os.getenv("DEFAULT_GAMES_PER_TEAM", "20"))
    EXTRA_INNING_CAP: int = int(os.getenv("EXTRA_INNING_CAP", "14"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
