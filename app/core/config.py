"""Application configuration with environment variables."""

import json

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version
    VERSION: str = "0.1.0"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite+pysqlite:///./solar_ops.db"

    # Bearer token (supports key rotation)
    JWT_SECRET: str = "change-this-in-production"
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_EXPIRES_HOURS: int = 12

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute)
    RATE_LIMIT_AUTH: int = 5  # Login attempts
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # GoHighLevel CRM
    GHL_API_TOKEN: str = ""  # Location API key (JWT carrying location_id)
    GHL_LOCATION_ID: str = ""  # Overrides the location_id embedded in the token
    GHL_API_BASE: str = "https://rest.gohighlevel.com/v1"
    GHL_TIMEOUT_SECONDS: float = 10.0
    # JSON object: display name or username -> GHL user id, for names fuzzy matching gets wrong
    GHL_USER_NAME_OVERRIDES: str = ""

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.JWT_SECRET]
        if self.JWT_SECRET_PREVIOUS:
            secrets.append(self.JWT_SECRET_PREVIOUS)
        return secrets

    @property
    def ghl_user_name_overrides(self) -> dict[str, str]:
        """Parse GHL_USER_NAME_OVERRIDES; malformed input yields no overrides."""
        if not self.GHL_USER_NAME_OVERRIDES:
            return {}
        try:
            data = json.loads(self.GHL_USER_NAME_OVERRIDES)
        except ValueError:
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items() if v}


settings = Settings()
