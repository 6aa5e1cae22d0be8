from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Neo4j (persisted graph store)
    NEO4J_URI: str = "bolt://neo4j:7687"
    NEO4J_USER: str = "neo4j"
    NEO4J_PASSWORD: str = "physgraph_dev"
    NEO4J_DATABASE: str = "neo4j"
    NEO4J_POOL_SIZE: int = 20
    NEO4J_CONNECTION_TIMEOUT: float = 5.0

    # Redis (shared layout cache)
    REDIS_URL: str = "redis://redis:6379/0"
    LAYOUT_CACHE_TTL: int = 3600

    # Layout config
    NETWORK_ITERATIONS: int = 500
    CANVAS_WIDTH: int = 2000
    LAYOUT_SEED: int = 42

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="json", description="'json' for production, 'console' for dev")


def get_settings() -> Settings:
    return Settings()
