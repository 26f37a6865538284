# core/config.py
import os

from dotenv import load_dotenv

load_dotenv()


def _optional_float(raw: str | None) -> float | None:
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


class Settings:
    """Environment-driven settings shared by the app and the gateway client."""

    def __init__(self) -> None:
        self.API_BASE_URL: str = os.getenv(
            "API_BASE_URL", "http://localhost:5018/api"
        ).rstrip("/")
        # None means requests wait indefinitely for the backend.
        self.API_REQUEST_TIMEOUT: float | None = _optional_float(
            os.getenv("API_REQUEST_TIMEOUT")
        )
        self.DEBUG: bool = os.getenv("DEBUG", "false").lower() in ("1", "true", "yes")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
