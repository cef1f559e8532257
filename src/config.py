"""
Configuration settings for the application.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()


def _optional_int(name: str) -> int | None:
    raw = os.getenv(name)
    if not raw:
        return None
    return int(raw)


class Settings:
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Redis settings (build state, chat history, session locks)
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    BUILD_KEY_PREFIX: str = os.getenv("BUILD_KEY_PREFIX", "build:")
    BUILD_TTL_SECONDS: int | None = _optional_int("BUILD_TTL_SECONDS")
    SESSION_LOCK_PREFIX: str = os.getenv("SESSION_LOCK_PREFIX", "lock:build:")
    SESSION_LOCK_TTL_SECONDS: int = int(os.getenv("SESSION_LOCK_TTL_SECONDS", "30"))
    SESSION_LOCK_WAIT_SECONDS: float = float(
        os.getenv("SESSION_LOCK_WAIT_SECONDS", "10")
    )
    CHAT_HISTORY_KEY_PREFIX: str = os.getenv(
        "CHAT_HISTORY_KEY_PREFIX",
        "chat:history:",
    )
    CHAT_HISTORY_LIMIT: int = int(os.getenv("CHAT_HISTORY_LIMIT", "20"))

    # Catalog snapshot written by the ingestion job
    CATALOG_PATH: str = os.getenv("CATALOG_PATH", "data/dealer.json")

    # Search / assembly settings
    SEARCH_DEFAULT_LIMIT: int = int(os.getenv("SEARCH_DEFAULT_LIMIT", "10"))
    SEARCH_MAX_LIMIT: int = int(os.getenv("SEARCH_MAX_LIMIT", "50"))
    PRESENTATION_TOP_N: int = int(os.getenv("PRESENTATION_TOP_N", "5"))
    SLOT_SEARCH_TIMEOUT_SECONDS: float = float(
        os.getenv("SLOT_SEARCH_TIMEOUT_SECONDS", "2.0")
    )

    # Decoder / LLM settings
    OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    REPHRASE_HISTORY_MESSAGES: int = int(os.getenv("REPHRASE_HISTORY_MESSAGES", "8"))

    # Store presentation
    STORE_NAME: str = os.getenv("STORE_NAME", "Over-Shop.kz")
    STORE_TIMEZONE: str = os.getenv("STORE_TIMEZONE", "Asia/Almaty")

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.
        """
        return self.ENVIRONMENT.lower() == "production"

    @property
    def decoder_enabled(self) -> bool:
        """Return True when a decoder client can be initialized."""
        return bool(self.OPENAI_API_KEY)

    def __init__(self):
        self.env = os.getenv("ENV", "dev")
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        logging.basicConfig(level=self.log_level)
        self.logger = logging.getLogger(__name__)

        self.logger.debug(
            f"Config initialized with env={self.env}, debug={self.debug}, "
            f"log_level={self.log_level}"
        )


# Create a global settings instance for import
settings = Settings()
