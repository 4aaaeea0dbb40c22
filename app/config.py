from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

BASE_DIR = Path(__file__).resolve().parent.parent
ENV_FILE = BASE_DIR / ".env"


class Settings(BaseSettings):
    # Application
    PROJECT_NAME: str = "Weave"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Security
    # Tokens are issued by the external identity layer; we only verify them.
    SECRET_KEY: str = ""
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080  # 7 days
    TOKEN_URL: str = "/api/auth/token"
    ACCESS_TOKEN_COOKIE: str = "access_token"

    # Database
    # Default to a local sqlite file for development; override via .env in production.
    DATABASE_URL: str = "sqlite:///./weave.db"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Edge redirects
    SIGN_IN_PATH: str = "/api/auth/signin"
    UNAUTHORIZED_PATH: str = "/unauthorized"

    # Associations
    ENFORCE_ASSOCIATION_DEACTIVATION: bool = True
    DEFAULT_MAX_POPULATION: int = 30

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE), case_sensitive=True, extra="ignore"
    )


settings = Settings()
