from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "Shoal"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "DEBUG"

    # Database. The store keeps a single connection, so the default in-memory
    # database lives exactly as long as the process.
    database_url: str = "sqlite+aiosqlite:///:memory:"
    dump_path: str = "shoal-dump.sqlite"

    # Server
    host: str = "127.0.0.1"
    port: int = 3000

    # Sessions
    session_header: str = "Shoal-Session-Id"
    session_ttl_seconds: int = 3600
    reap_interval_seconds: float = 60.0

    # CORS: comma-separated origins
    cors_allow_origins: str = "http://localhost:3000"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


settings = Settings()
