from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    ENV: str = "development"
    DATABASE_URL: str = "sqlite:///./pricing.db"
    SQL_ECHO: bool = False

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8080"

    LOG_LEVEL: str = "INFO"

    # Налог включён, если у платформы ещё нет строки настроек
    TAX_ENABLED_DEFAULT: bool = True

    # Бейдж для офферов без собственного текста
    DEFAULT_OFFER_BADGE: str = "Offer"

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    class Config:
        env_file = ".env"


settings = Settings()
