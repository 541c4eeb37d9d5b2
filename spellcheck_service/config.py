"""
Configuration management using Pydantic Settings.
Loads configuration from environment variables and .env file.
"""
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # CORS Configuration
    CORS_ORIGINS: str = "*"

    # Development/Debug
    DEBUG: bool = False
    RELOAD: bool = False

    # Spell-check Configuration
    SPELLCHECK_ENABLED: bool = True  # Disable to run the service without any dictionaries
    SPELLCHECK_DICTIONARY_PATHS: str = "/app/data/dictionaries"  # Comma-separated search paths, first wins
    SPELLCHECK_SELECTED_DICTS: str = "en_GB"  # Comma-separated language codes loaded at startup
    SPELLCHECK_RELOAD_DELAY_SECONDS: float = 5.0  # Grace period before the first dictionary load
    SPELLCHECK_MAX_EDIT_DISTANCE: int = 2  # Max edit distance for suggestions (1-3)
    SPELLCHECK_PREFIX_LENGTH: int = 7  # SymSpell optimization parameter
    SPELLCHECK_SUGGESTION_COUNT: int = 5  # Max suggestions per dictionary
    SPELLCHECK_MIN_WORD_LENGTH: int = 2  # Text checking skips words shorter than this

    # Logging Configuration (Optional - per-module log levels)
    APP_LOG_LEVEL: Optional[str] = None
    UVICORN_LOG_LEVEL: Optional[str] = None
    SYMSPELL_LOG_LEVEL: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def dictionary_paths_list(self) -> List[str]:
        """Parse dictionary search paths from comma-separated string."""
        return [path.strip() for path in self.SPELLCHECK_DICTIONARY_PATHS.split(",") if path.strip()]

    @property
    def selected_dicts_list(self) -> List[str]:
        """Parse the initially selected language codes from comma-separated string."""
        return [code.strip() for code in self.SPELLCHECK_SELECTED_DICTS.split(",") if code.strip()]


# Global settings instance
settings = Settings()
