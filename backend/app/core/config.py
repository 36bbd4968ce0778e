from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./inventory.db"
    ENVIRONMENT: str = "development"

    # CORS origins as a JSON list, e.g. ["http://localhost:3000"]
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    LOG_LEVEL: str = "INFO"

    # Dashboard analytics
    RECENT_WINDOW_DAYS: int = 7
    TOP_PRODUCTS_LIMIT: int = 10
    SPARSE_FALLBACK_ENABLED: bool = True

    # Dev-only graph seeding; always allowed outside production
    ALLOW_DEV_SEED: bool = False

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    @property
    def dev_seed_allowed(self) -> bool:
        return self.ALLOW_DEV_SEED or self.ENVIRONMENT != "production"


settings = Settings()
