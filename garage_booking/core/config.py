from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Garage Service Booking"
    API_PREFIX: str = "/api"

    # Server
    PORT: int = 8000
    ENVIRONMENT: str = "development"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/errors.log"

    # Storage
    DATABASE_PATH: str = "data/bookings.db"
    DB_TIMEOUT_SECONDS: float = 5.0

    # Booking rules
    SLOT_CAPACITY: int = 2

    # Public form is served from another origin
    CORS_ORIGINS: str = "*"

    # Admin view
    API_BASE_URL: str = "http://localhost:8000"
    ADMIN_REFRESH_SECONDS: int = 5

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
