# backend/userapi/core/config.py

from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_env: str = "dev"

    database_url: str = "sqlite:///./users.db"

    # pbkdf2_sha256 rounds (work factor)
    password_hash_rounds: int = 29000

    # GET /users paging
    default_take: int = 100
    max_take: int = 1000

    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    # comma-separated allowlist, e.g. "https://example.com,http://localhost:3000"
    cors_origins: str = ""

    host: str = "0.0.0.0"
    port: int = 4000

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def allow_origins(self) -> List[str]:
        if self.cors_origins.strip():
            return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        return ["http://localhost:3000"]


settings = Settings()
