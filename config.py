"""
Configuration module for the Career Coach Bridge application.
Handles environment variables and application settings.
"""
import os
from dotenv import load_dotenv
from utils.logger import app_logger

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str) -> float | None:
    value = os.getenv(name)
    return float(value) if value else None


class Config:
    """Application configuration class."""

    # Upstream credential (legacy VITE_ prefixed alias accepted)
    DEEPSEEK_API_KEY: str = os.getenv("DEEPSEEK_API_KEY", "")
    VITE_DEEPSEEK_API_KEY: str = os.getenv("VITE_DEEPSEEK_API_KEY", "")

    # Upstream API Configuration
    UPSTREAM_BASE_URL: str = os.getenv("UPSTREAM_BASE_URL", "https://api.deepseek.com")
    DEFAULT_MODEL: str = os.getenv("DEFAULT_MODEL", "deepseek-chat")
    TEMPERATURE: float = 0.7
    MAX_TOKENS: int = 2000

    # Retry policy (buffered mode only)
    MAX_RETRIES: int = 3
    RETRY_DELAY_SECONDS: float = 1.0

    # Timeouts (in seconds). No read timeout unless configured.
    UPSTREAM_CONNECT_TIMEOUT: float = 10.0
    UPSTREAM_READ_TIMEOUT: float | None = _env_float("UPSTREAM_READ_TIMEOUT")

    # Application Settings
    APP_TITLE: str = "Career Coach Bridge"
    DEFAULT_STREAM: bool = _env_bool("CHAT_STREAM_DEFAULT", False)

    # Client settings
    CHAT_TRANSPORT: str = os.getenv("CHAT_TRANSPORT", "proxy").lower()
    PROXY_ENDPOINT: str = os.getenv("PROXY_ENDPOINT", "http://localhost:8000/chat")
    HISTORY_DB_PATH: str = os.getenv("HISTORY_DB_PATH", "data/local_store.db")

    TRANSPORTS = ("proxy", "direct")

    @classmethod
    def get_api_key(cls) -> str | None:
        """Resolve the upstream credential, primary name first."""
        return cls.DEEPSEEK_API_KEY or cls.VITE_DEEPSEEK_API_KEY or None

    @classmethod
    def get_upstream_url(cls) -> str:
        """Full chat completions URL of the upstream provider."""
        return f"{cls.UPSTREAM_BASE_URL.rstrip('/')}/chat/completions"

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and log warnings for missing settings."""
        if not cls.get_api_key():
            app_logger.warning("DEEPSEEK_API_KEY not found in environment or .env file")
            app_logger.warning("The /chat endpoint will answer 500 until a key is configured.")

        if cls.CHAT_TRANSPORT not in cls.TRANSPORTS:
            app_logger.warning(
                f"Unknown CHAT_TRANSPORT '{cls.CHAT_TRANSPORT}', expected one of {cls.TRANSPORTS}"
            )


Config.validate()
