import logging
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import model_validator, ConfigDict
from functools import lru_cache

logger = logging.getLogger(__name__)

CREATIVE_SOURCE_BACKENDS = ("puppeteer_mcp", "static")
INTELLIGENCE_STORE_BACKENDS = ("database", "memory_mcp", "in_memory")


class Settings(BaseSettings):
    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment: "development" or "production"
    environment: str = "development"
    log_level: str = "INFO"

    database_url: str = "postgresql+asyncpg://localhost/ad_intelligence"

    @model_validator(mode="before")
    @classmethod
    def _fix_database_url_for_asyncpg(cls, values: dict) -> dict:
        """Hosted Postgres gives postgresql:// — we need postgresql+asyncpg:// for asyncpg."""
        if not isinstance(values, dict):
            return values
        url = values.get("database_url") or ""
        if url.startswith("postgresql://") and "+asyncpg" not in url:
            values["database_url"] = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return values

    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # Creative Source (browser automation MCP server driving the Ad Library)
    creative_source_backend: str = "puppeteer_mcp"
    puppeteer_mcp_url: str = ""  # empty = source unavailable, synthetic data only
    ad_library_country: str = "US"
    acquisition_timeout_seconds: float = 30.0
    ad_library_settle_seconds: float = 3.0
    max_live_creatives: int = 20
    synthetic_seed: Optional[int] = None

    # Intelligence Store (knowledge graph)
    intelligence_store_backend: str = "database"
    memory_mcp_url: str = ""
    recording_timeout_seconds: float = 10.0
    record_in_background: bool = False

    top_ads_limit: int = 6

    @model_validator(mode="after")
    def _validate_backends(self) -> "Settings":
        """Reject unknown backends early, and fixture backends in production."""
        if self.creative_source_backend not in CREATIVE_SOURCE_BACKENDS:
            raise ValueError(
                f"CREATIVE_SOURCE_BACKEND must be one of {', '.join(CREATIVE_SOURCE_BACKENDS)}"
            )
        if self.intelligence_store_backend not in INTELLIGENCE_STORE_BACKENDS:
            raise ValueError(
                f"INTELLIGENCE_STORE_BACKEND must be one of {', '.join(INTELLIGENCE_STORE_BACKENDS)}"
            )
        if self.intelligence_store_backend == "memory_mcp" and not self.memory_mcp_url:
            raise ValueError("MEMORY_MCP_URL must be set when INTELLIGENCE_STORE_BACKEND=memory_mcp.")
        if self.is_production:
            if self.intelligence_store_backend == "in_memory":
                raise ValueError(
                    "INTELLIGENCE_STORE_BACKEND=in_memory is for tests only. "
                    "Use database or memory_mcp in production."
                )
            if self.creative_source_backend == "static":
                raise ValueError(
                    "CREATIVE_SOURCE_BACKEND=static serves canned ads and is not allowed in production."
                )
            if not self.puppeteer_mcp_url:
                logger.warning("PUPPETEER_MCP_URL is not set — every analysis will use synthetic creatives.")
            if not self.database_url or "localhost" in self.database_url:
                logger.warning("DATABASE_URL appears to point at localhost in production.")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_origin_list(self) -> list[str]:
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        return origins or ["http://localhost:3000", "http://localhost:5173"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
