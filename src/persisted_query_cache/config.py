import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from persisted_query_cache.errors import ConfigurationError

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Route
    graphql_path: str = os.getenv("GRAPHQL_PATH", "/graphql")
    persisted_queries_file: str | None = os.getenv("PERSISTED_QUERIES_FILE")

    # Cache
    cache_max_entries: int = int(os.getenv("CACHE_MAX_ENTRIES", "100"))
    cache_ttl: int = int(os.getenv("CACHE_TTL", "3600"))  # 1 hour default
    cache_sort_variable_keys: bool = os.getenv("CACHE_SORT_VARIABLE_KEYS", "false").lower() == "true"

    # Upstream GraphQL server
    upstream_graphql_url: str = os.getenv("UPSTREAM_GRAPHQL_URL", "http://localhost:4000/graphql")
    upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "30"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "info")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not self.graphql_path.startswith("/"):
            raise ConfigurationError(f"GRAPHQL_PATH must start with '/', got {self.graphql_path!r}")

        if self.cache_max_entries < 1:
            raise ConfigurationError("CACHE_MAX_ENTRIES must be at least 1")

        if self.cache_ttl <= 0:
            raise ConfigurationError("CACHE_TTL must be a positive number of seconds")

        if self.upstream_timeout <= 0:
            raise ConfigurationError("UPSTREAM_TIMEOUT must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
