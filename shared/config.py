"""
Runtime settings for the ticket inventory service.

Values come from environment variables prefixed with ``TICKETING_`` or from
a ``.env`` file at the project root.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TICKETING_",
        env_file=str(_PROJECT_ROOT / ".env"),
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "Ticket Inventory Service"
    VERSION: str = "1.0.0"

    # JSON fixtures: users.json, events.json and optionally tickets.json
    DATA_DIR: Path = _PROJECT_ROOT / "data"

    # Simulated backend latency before a booking is evaluated
    BOOKING_LATENCY_SECONDS: float = 0.0

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s"

    # Idle interval between keep-alive comments on the SSE update stream
    SSE_KEEPALIVE_SECONDS: float = 15.0


settings = Settings()
