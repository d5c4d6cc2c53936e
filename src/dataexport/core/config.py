from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[Path] = None  # File logging is off unless set
    LOG_RETENTION: str = "10 days"
    LOG_ROTATION: str = "10 MB"

    # Hosted login (ClientLogin)
    CLIENT_LOGIN_URL: str = "https://www.google.com/accounts/ClientLogin"
    CLIENT_LOGIN_SERVICE: str = "ah"
    CLIENT_LOGIN_SOURCE: str = "Misc-remote_api-0.1"
    CLIENT_LOGIN_ACCOUNT_TYPE: str = "HOSTED_OR_GOOGLE"

    # Application endpoints
    LOGIN_PATH: str = "/_ah/login"
    REMOTE_API_PATH: str = "/_ah/remote_api"

    # Hosts matching this pattern use the development login flow
    LOCAL_HOST_PATTERN: str = r"localhost|127\.0\.0\.1|\[::1\]"

    # Import
    DEFAULT_FILE_PATTERN: str = r"data_item_\d+\.json"

    # Network
    HTTP_TIMEOUT: float = 5.0  # Same as the httpx default


settings = Settings()
