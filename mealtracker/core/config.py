import logging
from typing import List, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Only ever used when ENVIRONMENT is development or test.
DEV_JWT_SECRET = "dev-secret-change-me"


class Settings(BaseSettings):
    environment: str = "development"
    database_url: str = "sqlite:///./meal-tracker.db"
    log_level: str = "INFO"

    # auth policy
    jwt_secret: Optional[str] = None
    session_ttl_hours: int = 24
    password_min_length: int = 6
    bcrypt_rounds: int = 10
    session_cookie_name: str = "session"
    session_sweep_enabled: bool = True
    session_sweep_interval_seconds: float = 3600

    # внешние сервисы: без ключей работаем без перевода и без поиска
    nutritionix_app_id: Optional[str] = None
    nutritionix_api_key: Optional[str] = None
    nutritionix_base_url: str = "https://trackapi.nutritionix.com/v2"
    deepl_api_key: Optional[str] = None
    deepl_api_url: str = "https://api-free.deepl.com/v2/translate"
    translation_enabled: bool = True
    external_timeout_seconds: float = 10.0

    # reports
    daily_calorie_target: int = 2000
    timezone: str = "UTC"

    cors_origins: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_signing_secret(self) -> "Settings":
        if self.jwt_secret and self.jwt_secret.strip():
            return self
        if self.environment not in ("development", "test"):
            raise ValueError(
                f"JWT_SECRET must be set when ENVIRONMENT={self.environment}"
            )
        logger.warning("JWT_SECRET is not set, using the development secret")
        self.jwt_secret = DEV_JWT_SECRET
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cookie_secure(self) -> bool:
        return self.is_production

    @property
    def session_ttl_seconds(self) -> int:
        return int(self.session_ttl_hours * 60 * 60)

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
