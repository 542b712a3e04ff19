from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List

DEV_JWT_SECRET = "dev-only-change-me"


class ContentAPISettings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Server Configuration
    SERVICE_NAME: str = "content-api"
    SERVICE_VERSION: str = "1.0.0"
    SERVICE_HOST: str = "0.0.0.0"
    PORT: int = 3000
    PORT_RETRY_ATTEMPTS: int = 10
    SHUTDOWN_TIMEOUT_SECONDS: int = 10

    # Database connections
    MONGODB_URI: str = "mongodb://localhost:27017/content"
    DATABASE_NAME: str = "content"  # used when the URI names no database
    MONGO_CONNECT_RETRIES: int = 3
    MONGO_RETRY_DELAY: int = 2

    # Cloudinary
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_FOLDER: str = "anando-computer"

    # Uploads
    UPLOAD_FIELD_NAME: str = "image"
    UPLOAD_MAX_BYTES: int = 5 * 1024 * 1024
    UPLOAD_ALLOWED_CONTENT_TYPES: str = "image/jpeg,image/png,image/gif"
    UPLOAD_ALLOWED_FORMATS: str = "jpg,jpeg,png,gif"
    UPLOAD_MAX_DIMENSION: int = 1000

    # Security - JWT
    JWT_SECRET_KEY: str = DEV_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_TOKEN_EXPIRE_DAYS: int = 100

    # Default Admin Configuration
    DEFAULT_ADMIN_EMAIL: str = "admin@admin.com"
    DEFAULT_ADMIN_PASSWORD: str = "admin"

    # CORS settings
    ALLOWED_ORIGINS: str = "*"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow",  # the shared .env may carry keys this service doesn't use
    )

    @property
    def allowed_content_types(self) -> List[str]:
        return [t.strip() for t in self.UPLOAD_ALLOWED_CONTENT_TYPES.split(",") if t.strip()]

    @property
    def allowed_formats(self) -> List[str]:
        return [f.strip() for f in self.UPLOAD_ALLOWED_FORMATS.split(",") if f.strip()]

    @property
    def allowed_origins(self) -> List[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]


@lru_cache()
def get_settings() -> ContentAPISettings:
    return ContentAPISettings()


def get_app_settings(request: Request) -> ContentAPISettings:
    """FastAPI dependency returning the settings the app was built with"""
    return request.app.state.settings
