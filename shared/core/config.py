import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    JWT_SECRET: str | None = os.getenv("JWT_SECRET")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

    # 64 hex chars (AES-256)
    ENCRYPTION_KEY: str | None = os.getenv("ENCRYPTION_KEY")

    DATABASE_URL: str | None = os.getenv("DATABASE_URL")
    DB_USER: str | None = os.getenv("DB_USER")
    DB_PASS: str | None = os.getenv("DB_PASS")
    DB_HOST: str | None = os.getenv("DB_HOST")
    DB_PORT: str | None = os.getenv("DB_PORT")
    RENTAL_DB_NAME: str | None = os.getenv("RENTAL_DB_NAME")
    DB_SSLMODE: str = os.getenv("DB_SSLMODE", "require")

    # Decrypt-heavy scans are bounded by batch size, item cap and wall clock
    SEARCH_BATCH_SIZE: int = int(os.getenv("SEARCH_BATCH_SIZE", 5))
    SEARCH_MAX_SCAN_ITEMS: int = int(os.getenv("SEARCH_MAX_SCAN_ITEMS", 1000))
    SEARCH_TIMEOUT_SECONDS: float = float(os.getenv("SEARCH_TIMEOUT_SECONDS", 3))
    AVAILABILITY_BATCH_SIZE: int = int(os.getenv("AVAILABILITY_BATCH_SIZE", 5))
    AVAILABILITY_TIMEOUT_SECONDS: float = float(
        os.getenv("AVAILABILITY_TIMEOUT_SECONDS", 3))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()

RENTAL_DATABASE_URL = settings.DATABASE_URL or (
    f"postgresql+psycopg2://{settings.DB_USER}:{settings.DB_PASS}@{settings.DB_HOST}:{settings.DB_PORT}/{settings.RENTAL_DB_NAME}?sslmode={settings.DB_SSLMODE}"
)
