"""Application configuration from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    layerscope_env: str = "development"
    layerscope_log_level: str = "info"
    layerscope_host: str = "127.0.0.1"
    layerscope_port: int = 8000

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Inference defaults, overridable per request
    proximity_threshold: float = 20.0
    max_depth: int = 32
    layout_strategy: Literal["geometric", "scored"] = "geometric"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
