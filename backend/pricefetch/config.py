"""Application configuration via Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # App
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Rendering (headless browser)
    RENDER_ENABLED: bool = True
    RENDER_POOL_SIZE: int = 1
    RENDER_HEADLESS: bool = True
    RENDER_SETTLE_MS: int = 1000  # Baseline settle time every render waits
    RENDER_CHECKOUT_TIMEOUT_S: float = 60.0
    RENDER_LAUNCH_ATTEMPTS: int = 3

    # Direct HTTP
    HTTP_MAX_CONNECTIONS: int = 20
    DEFAULT_USER_AGENT: str = "Mozilla/5.0 (compatible; PriceFetchBot/1.0)"

    def get_render_pool_size(self) -> int:
        """Number of renderer slots, never less than one."""
        return max(1, self.RENDER_POOL_SIZE)


settings = Settings()
