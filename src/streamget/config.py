"""Configuration using pydantic-settings."""

from pydantic_settings import BaseSettings


class FetchSettings(BaseSettings):
    """Fetch defaults."""

    timeout: float = 10.0
    user_agent: str | None = None
    max_buffered_chunks: int = 16
    chunk_size: int = 65536

    model_config = {"env_prefix": "STREAMGET_"}


settings = FetchSettings()
