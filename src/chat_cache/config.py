import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Chat endpoint
    chat_api_base_url: str = os.getenv("CHAT_API_BASE_URL", "http://localhost:8787/api")
    chat_api_key: str | None = os.getenv("CHAT_API_KEY")
    chat_request_timeout: float = float(os.getenv("CHAT_REQUEST_TIMEOUT", "45"))
    chat_history_turns: int = int(os.getenv("CHAT_HISTORY_TURNS", "6"))

    # Cache
    cache_max_entries: int = int(os.getenv("CACHE_MAX_ENTRIES", "500"))
    cache_ttl: float = float(os.getenv("CACHE_TTL", "600"))  # 10 minutes default
    cache_key_turns: int = int(os.getenv("CACHE_KEY_TURNS", "3"))

    # Synthetic typing speed (milliseconds per word)
    instant_typing_delay_ms: float = float(os.getenv("INSTANT_TYPING_DELAY_MS", "25"))
    cached_typing_delay_ms: float = float(os.getenv("CACHED_TYPING_DELAY_MS", "15"))
    fallback_typing_delay_ms: float = float(os.getenv("FALLBACK_TYPING_DELAY_MS", "30"))

    # Image generation
    image_url_template: str = os.getenv(
        "IMAGE_URL_TEMPLATE",
        "https://image.pollinations.ai/prompt/{prompt}?width=1024&height=1024&seed={seed}&enhance=true",
    )

    # Optional: remote text polish
    polish_base_url: str = os.getenv("POLISH_BASE_URL", "https://openrouter.ai/api/v1")
    polish_api_key: str | None = os.getenv("POLISH_API_KEY")
    polish_model: str = os.getenv("POLISH_MODEL", "qwen/qwen-2.5-72b-instruct:free")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    @property
    def polish_enabled(self) -> bool:
        """Check if the remote text polish endpoint is configured.

        Returns:
            True if an API key for the polish endpoint is set, False otherwise
        """
        return bool(self.polish_api_key)

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not 100 <= self.cache_max_entries <= 2000:
            raise ValueError(
                f"CACHE_MAX_ENTRIES must be between 100 and 2000, got {self.cache_max_entries}"
            )

        if not 1 <= self.cache_key_turns <= 3:
            raise ValueError(f"CACHE_KEY_TURNS must be 1, 2 or 3, got {self.cache_key_turns}")

        if self.cache_ttl <= 0:
            raise ValueError("CACHE_TTL must be positive")

        if self.chat_request_timeout <= 0:
            raise ValueError("CHAT_REQUEST_TIMEOUT must be positive")

        if self.chat_history_turns < 1:
            raise ValueError("CHAT_HISTORY_TURNS must be at least 1")

        if "{prompt}" not in self.image_url_template:
            raise ValueError("IMAGE_URL_TEMPLATE must contain a {prompt} placeholder")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
