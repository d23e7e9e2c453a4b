"""
# Configuration Management Module

Settings for the Admin Backend, built on **Pydantic Settings**.

## Loading Hierarchy

Higher layers override lower layers:

1. **Environment variables** (e.g. `export MONGODB_URL="..."`)
2. **Config file** pointed to by `ADMIN_BACKEND_CONFIG_PATH`
3. **`.admin_backend`** file in the project root
4. **`.env`** file in the project root
5. **Defaults** declared on `Settings`

## Example `.env`

```
DEBUG=true
MONGODB_URL=mongodb://localhost:27017
MONGODB_DATABASE=admin_backend_dev
SECRET_KEY=replace-with-a-long-random-string
```

## Usage

```python
from admin_backend.config import settings

collection_name = settings.MONGODB_DATABASE
limit = settings.DEFAULT_PAGE_LIMIT
```
"""

import os
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Constants ---
CONFIG_FILENAME: str = ".admin_backend"
DEFAULT_ENV_FILENAME: str = ".env"
CONFIG_ENV_VAR: str = "ADMIN_BACKEND_CONFIG_PATH"
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent


# --- Config file discovery (no logging) ---
def get_config_path() -> Optional[str]:
    """
    Determines the configuration file path.

    Checks, in order, the `ADMIN_BACKEND_CONFIG_PATH` environment variable, a
    `.admin_backend` file and a `.env` file in the project root. Returns `None`
    when no file exists, leaving the environment as the only source.

    Returns:
        Optional[str]: The path to the configuration file, or `None` if not found.
    """
    env_path: Optional[str] = os.environ.get(CONFIG_ENV_VAR)
    if env_path and os.path.exists(env_path):
        return env_path
    config_path: Path = PROJECT_ROOT / CONFIG_FILENAME
    if config_path.exists():
        return str(config_path)
    env_path_file: Path = PROJECT_ROOT / DEFAULT_ENV_FILENAME
    if env_path_file.exists():
        return str(env_path_file)
    return None


CONFIG_PATH: Optional[str] = get_config_path()
if CONFIG_PATH:
    load_dotenv(dotenv_path=CONFIG_PATH, override=True)


class Settings(BaseSettings):
    """
    Application configuration settings model.

    **Configuration Groups:**
    *   **Server**: Host, port, debug mode, CORS origins.
    *   **Database**: MongoDB connection and pool settings.
    *   **Security**: JWT verification key and algorithm.
    *   **Listing**: Default and maximum page sizes for paginated queries.
    *   **Logging**: Default log level.
    """

    model_config = SettingsConfigDict(
        env_file=CONFIG_PATH if CONFIG_PATH else None,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Server configuration
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    DEBUG: bool = True
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: str = ""

    # MongoDB configuration
    MONGODB_URL: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "admin_backend"
    MONGODB_CONNECTION_TIMEOUT: int = 10000
    MONGODB_SERVER_SELECTION_TIMEOUT: int = 5000
    MONGODB_MIN_POOL_SIZE: int = 5
    MONGODB_MAX_POOL_SIZE: int = 50

    # Authentication (optional)
    MONGODB_USERNAME: Optional[str] = None
    MONGODB_PASSWORD: Optional[SecretStr] = None

    # JWT verification
    SECRET_KEY: SecretStr = SecretStr("")
    ALGORITHM: str = "HS256"

    # Listing
    DEFAULT_PAGE_LIMIT: int = 10
    MAX_PAGE_LIMIT: int = 1000

    # Logging
    DEFAULT_LOG_LEVEL: str = "INFO"

    @field_validator("MONGODB_URL", mode="before")
    @classmethod
    def no_empty_urls(cls, v: Any, info: Any) -> Any:
        """
        Validates that the MongoDB URL is not empty.

        Raises:
            ValueError: If the URL is empty or whitespace.
        """
        if not v or not str(v).strip():
            raise ValueError(f"{info.field_name} must be set via environment or config file and not empty!")
        return v

    @field_validator("DEFAULT_PAGE_LIMIT", "MAX_PAGE_LIMIT", "MONGODB_MIN_POOL_SIZE", "MONGODB_MAX_POOL_SIZE", mode="before")
    @classmethod
    def validate_positive_integers(cls, v: Any, info: Any) -> int:
        """Validates that numeric settings are positive integers."""
        value = int(v)
        if value <= 0:
            raise ValueError(f"{info.field_name} must be a positive integer")
        return value

    @property
    def is_production(self) -> bool:
        """True when running with `ENVIRONMENT=production` and debug disabled."""
        return self.ENVIRONMENT.lower() == "production" and not self.DEBUG

    @property
    def cors_origins_list(self) -> List[str]:
        """`CORS_ORIGINS` split on commas, blanks removed."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
