"""
DarkShield Configuration

Central settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- Versioning ---
    ENGINE_VERSION: str = "1.0.0"
    API_VERSION: str = "1"

    # --- Detection ---
    DEFAULT_SENSITIVITY: str = os.getenv("DARKSHIELD_SENSITIVITY", "medium")
    MAX_REGIONS: int = int(os.getenv("DARKSHIELD_MAX_REGIONS", "500"))

    # --- Server ---
    HOST: str = os.getenv("DARKSHIELD_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("DARKSHIELD_PORT", "8000"))

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("DARKSHIELD_CORS_ORIGINS", "*")


settings = Settings()
