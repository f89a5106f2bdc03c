from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_ENV: str = "local"
    LOG_LEVEL: str = "INFO"

    # Used when the caller does not pass a timezone
    DEFAULT_TIMEZONE: str = "Asia/Kolkata"

    EPHEMERIS_BACKEND: Literal["swisseph", "subprocess"] = "swisseph"
    SWISSEPH_EPHE_PATH: str = ""
    EPHEMERIS_TIMEOUT_SEC: float = 10.0
    # Interpreter for the worker process; empty means the running one
    EPHEMERIS_WORKER_PYTHON: Optional[str] = None

    # Opt-in 06:00/18:00 daylight when rise/set cannot be computed (labelled in output)
    ALLOW_APPROXIMATE_DAYLIGHT: bool = False

    GEOCODER_USER_AGENT: str = "muhurat-finder"
    GEOCODER_TIMEOUT_SEC: float = 10.0

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
