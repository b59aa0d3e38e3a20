from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Central configuration for the dashboard.

    Values are read from environment variables prefixed with BS_, e.g.:
      BS_BRAND_STORE_URL, BS_RENDER_SERVICE_URL, BS_LOG_LEVEL
    """

    brand_store_url: str = Field(
        default="http://localhost:3000/api/brand",
        description="Endpoint of the brand key-value store (GET/PUT JSON)",
    )
    render_service_url: str = Field(
        default="http://localhost:3000/api/render-pdf",
        description="Endpoint of the rendering service that turns HTML into a paginated document",
    )
    request_timeout: float = Field(default=20.0, description="Timeout for brand store calls, in seconds")
    render_timeout: float = Field(default=60.0, description="Timeout for render calls, in seconds")

    # Approximate preview panel space used for the initial fit-to-view zoom
    preview_budget_width: float = Field(default=700.0)
    preview_budget_height: float = Field(default=550.0)

    # Editor session cap and idle timeout (seconds since the last request)
    max_editor_sessions: int = Field(default=50)
    editor_idle_seconds: float = Field(default=1800.0)

    log_level: str = Field(default="INFO")
    pack_output_dir: str = Field(
        default="generated",
        description="Base directory for exported collateral packs",
    )

    class Config:
        env_prefix = "BS_"
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
