# config.py - Configuration management
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Catalog / order backend
    BACKEND_URL: str = "http://localhost:8000"
    REQUEST_TIMEOUT: float = 10.0
    HTTP_MAX_WORKERS: int = 4
    SEED_ON_START: bool = True  # Ask the backend to ensure its demo catalog exists

    # Customer identity used when checkout is called without one
    DEFAULT_EMAIL: str = "guest@example.com"
    DEFAULT_ADDRESS: str = "123 Main St"

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
