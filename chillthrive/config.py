from functools import lru_cache
import os
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    env: str = Field(default="dev", alias="ENV")
    timezone: str = Field(default="Asia/Kolkata", alias="TIMEZONE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    database_url: str = Field(default="", alias="DATABASE_URL")
    postgres_db: str = Field(default="chillthrive", alias="POSTGRES_DB")
    postgres_user: str = Field(default="chillthrive", alias="POSTGRES_USER")
    postgres_password: str = Field(default="chillthrive", alias="POSTGRES_PASSWORD")
    postgres_host: str = Field(default="localhost", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, alias="POSTGRES_PORT")

    jwt_secret: str = Field(default="secret", alias="JWT_SECRET")

    # Python weekday numbering, Monday is 0
    closed_weekday: int = Field(default=6, alias="CLOSED_WEEKDAY", ge=0, le=6)
    reservation_lock_timeout_ms: int = Field(default=3000, alias="RESERVATION_LOCK_TIMEOUT_MS")

    notifier_webhook_url: str = Field(default="", alias="NOTIFIER_WEBHOOK_URL")
    notifier_api_key: str = Field(default="", alias="NOTIFIER_API_KEY")
    feedback_url: str = Field(default="", alias="FEEDBACK_URL")
    outbox_dispatch_interval_sec: int = Field(default=30, alias="OUTBOX_DISPATCH_INTERVAL_SEC")
    outbox_max_attempts: int = Field(default=5, alias="OUTBOX_MAX_ATTEMPTS")

    class Config:
        populate_by_name = True

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv(override=False)
    return Settings(**os.environ)
