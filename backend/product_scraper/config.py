"""Application configuration via Pydantic Settings."""

from typing import List, Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # App
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 10000  # Render injects PORT
    CORS_ORIGINS: str = "*"  # Comma-separated list, "*" allows any origin
    DEFAULT_MODE: Literal["product", "html"] = "product"

    # Browser
    BROWSER_HEADLESS: bool = True
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    )
    NAVIGATION_TIMEOUT_MS: int = 45000
    WAIT_UNTIL: Literal["networkidle", "domcontentloaded"] = "networkidle"
    SELECTOR_TIMEOUT_MS: int = 20000
    BLOCK_RESOURCES: bool = False
    MIN_CONTENT_LENGTH: int = 500

    # Normalization
    DEFAULT_CURRENCY: str = "XOF"
    DEFAULT_CURRENCY_TOKEN: str = "FCFA"

    # Selector-based extraction: JSON file mapping host -> site profile
    SITE_PROFILES_PATH: str = ""

    # AI-assisted extraction (Gemini)
    AI_FALLBACK_ENABLED: bool = False
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_BASE_URL: str = ""
    GENERATION_TIMEOUT_SECONDS: float = 60.0
    MAX_PROMPT_HTML_CHARS: int = 200_000

    @model_validator(mode="after")
    def check_timeouts(self) -> "Settings":
        """Reject non-positive deadlines early, they would disable Playwright timeouts."""
        if self.NAVIGATION_TIMEOUT_MS <= 0 or self.SELECTOR_TIMEOUT_MS <= 0:
            raise ValueError("NAVIGATION_TIMEOUT_MS and SELECTOR_TIMEOUT_MS must be positive")
        if self.GENERATION_TIMEOUT_SECONDS <= 0:
            raise ValueError("GENERATION_TIMEOUT_SECONDS must be positive")
        return self

    def get_cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS into a list of origins.

        Returns:
            List of origin strings, ["*"] when every origin is allowed
        """
        origins = [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
        return origins or ["*"]


settings = Settings()
