from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field("sqlite+aiosqlite:///./data.db", alias="DATABASE_URL")
    document_key: str = Field("default", alias="DOCUMENT_KEY")

    cors_origins: str = Field("*", alias="CORS_ORIGINS")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Seconds a single subscriber send may take before it is treated as disconnected.
    broadcast_send_timeout: float = Field(5.0, alias="BROADCAST_SEND_TIMEOUT")

    port: int = Field(5000, alias="PORT")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
