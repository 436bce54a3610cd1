# slant3d_mock/core/config.py
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Mock Slant3D API"
    VERSION: str = "1.0.0"
    DOCS_URL: str = "/docs"
    OPENAPI_URL: str = "/openapi.json"
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"

    # CORS
    BACKEND_CORS_RAW_ORIGINS: str = "*"

    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 4000

    # "random" hands out 10-digit ids like the real service,
    # "sequential" lets the store allocate from its counter.
    ORDER_ID_STRATEGY: str = "random"

    # Simulated slicing latency (milliseconds)
    SLICER_MIN_DELAY_MS: int = 2000
    SLICER_MAX_DELAY_MS: int = 5000

    # Outbound webhook test call (seconds)
    WEBHOOK_TEST_TIMEOUT: float = 10.0

    DASHBOARD_LOG_LIMIT: int = 50
    ENABLE_RESET_ENDPOINT: bool = True

    def cors_origins(self):
        return [o.strip() for o in self.BACKEND_CORS_RAW_ORIGINS.split(",") if o.strip()]

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
