"""
Application settings (Pydantic Settings).
"""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

# .env next to backend/ (parent of cheapeats/)
_backend_dir = Path(__file__).resolve().parent.parent
_env_path = _backend_dir / ".env"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./cheapeats.db"
    # Local thumbnail files, one <restaurant_id>.jpg per cached row
    thumbnail_dir: str = str(_backend_dir / ".cache" / "thumbnails")
    # User setting: only prefetch thumbnails on an unmetered (Wi-Fi class) transport
    cache_images_on_wifi: bool = True
    # A server has no transport info; treat its uplink as unmetered unless told otherwise
    assume_unmetered: bool = True
    connectivity_probe_host: str = "1.1.1.1"
    connectivity_probe_port: int = 53
    # Weekday / HH:MM of deals are evaluated in this zone
    schedule_timezone: str = "America/Toronto"
    log_level: str = "INFO"

    class Config:
        env_file = _env_path
        extra = "ignore"

    @field_validator("thumbnail_dir", "schedule_timezone", "connectivity_probe_host", mode="after")
    @classmethod
    def strip_value(cls, v: str) -> str:
        return (v or "").strip()


settings = Settings()
