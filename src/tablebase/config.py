from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str  # MongoDB replica set URL, database name in the path
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    debug: bool = False
    cors_origins: list[str] = []
    enrichment_max_depth: int = 2  # Link hops resolved before records are returned unresolved
    default_page_limit: int = 10
    max_page_limit: int = 100

    model_config = {
        "env_file": [".env"],
        "env_prefix": "TABLEBASE_",
        "extra": "ignore",
    }
