from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # Application
    PROJECT_NAME: str = "Webinar Attendance Sync"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"

    # Database (CRM data layer)
    DATABASE_URL: str = "sqlite:///./attendance_sync.db"

    # Webhook verification
    ZOOM_VERIFICATION_TOKEN: Optional[str] = None

    # Event <-> webinar correlation
    WEBINAR_CUSTOM_FIELD: Optional[str] = None  # e.g. "custom_12"
    STRICT_EVENT_RESOLUTION: bool = True  # False: fall back to the request event_id

    # Zoom API
    ZOOM_DEFAULT_BASE_URL: str = "https://api.zoom.us/v2"
    ZOOM_HTTP_TIMEOUT_SECONDS: float = 10.0
    ZOOM_MAX_RETRIES: int = 3
    ZOOM_RETRY_BACKOFF: float = 0.5

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = "attendance_sync.log"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

settings = Settings()
