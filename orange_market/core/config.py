from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Literal


class Settings(BaseSettings):
    # Database
    db_url: str = Field("sqlite+aiosqlite:///./orange_market.sqlite3", alias="DB_URL")

    # JWT
    jwt_secret: str = Field(
        "orange-market-development-secret-change-me",
        alias="JWT_SECRET",
        min_length=32,
    )
    # Shared-secret (HMAC) signing only
    jwt_alg: Literal["HS256", "HS384", "HS512"] = Field("HS256", alias="JWT_ALG")
    jwt_ttl_seconds: int = Field(3600, alias="JWT_TTL_SECONDS", gt=0)

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
