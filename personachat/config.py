"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from functools import lru_cache

from personachat.utils.bot_data import BOT_PROFILES


class Settings(BaseSettings):
    """Centralised settings — no hardcoded values anywhere else."""

    # Google AI
    gemini_api_key: str = Field("", env="GEMINI_API_KEY")
    gemini_model: str = Field("gemini-2.5-flash", env="GEMINI_MODEL")
    max_output_tokens: int = Field(1000, env="MAX_OUTPUT_TOKENS")
    temperature: float = Field(0.7, env="TEMPERATURE")

    # Chat handler
    bot_variant: str = Field("challenge", env="BOT_VARIANT")
    max_duration_seconds: float = Field(30, env="MAX_DURATION_SECONDS")
    default_retry_seconds: int = Field(60, env="DEFAULT_RETRY_SECONDS")

    # Security
    allowed_origins: str = Field("http://localhost:3000", env="ALLOWED_ORIGINS")

    # App
    app_env: str = Field("development", env="APP_ENV")
    log_level: str = Field("INFO", env="LOG_LEVEL")

    # Terminal client
    personachat_api_url: str = Field("http://localhost:8000", env="PERSONACHAT_API_URL")

    @field_validator("bot_variant")
    @classmethod
    def _known_variant(cls, value: str) -> str:
        if value not in BOT_PROFILES:
            raise ValueError(
                f"Unknown bot variant {value!r} — expected one of {sorted(BOT_PROFILES)}"
            )
        return value

    # Derived
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list."""
        return [o.strip() for o in self.allowed_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()


settings = get_settings()
