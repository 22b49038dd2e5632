"""
Runtime settings for the portfolio API.

Values come from the environment (a local .env file is loaded first) so the
same code runs against a hosted MongoDB in production and without any
database at all in local development.
"""
import os
from dataclasses import dataclass, asdict
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y"}


def _int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


@dataclass
class Settings:
    database_url: Optional[str] = None
    database_name: Optional[str] = None
    content_collection: str = "portfolio_config"
    content_row_id: str = "main"
    files_bucket: str = "portfolio_images"
    cache_path: str = "data/portfolio_cache.json"
    autosave_delay: float = 1.0
    max_upload_bytes: int = 20 * 1024 * 1024
    max_photo_bytes: int = 5 * 1024 * 1024
    session_ttl_hours: int = 24 * 7
    public_base_url: str = ""
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = True

    def asdict(self) -> dict:
        data = asdict(self)
        if data.get("database_url"):
            data["database_url"] = "***"
        return data


def load_settings() -> Settings:
    s = Settings()
    s.database_url = os.getenv("DATABASE_URL") or None
    s.database_name = os.getenv("DATABASE_NAME") or None
    s.content_collection = os.getenv("CONTENT_COLLECTION", s.content_collection)
    s.content_row_id = os.getenv("CONTENT_ROW_ID", s.content_row_id)
    s.files_bucket = os.getenv("FILES_BUCKET", s.files_bucket)
    s.cache_path = os.getenv("CONTENT_CACHE_PATH", s.cache_path)
    s.public_base_url = os.getenv("PUBLIC_BASE_URL", s.public_base_url).rstrip("/")
    s.log_level = os.getenv("LOG_LEVEL", s.log_level).upper()
    s.log_dir = os.getenv("LOG_DIR", s.log_dir)
    s.log_to_file = _bool(os.getenv("LOG_TO_FILE"), s.log_to_file)

    try:
        s.autosave_delay = float(os.getenv("AUTOSAVE_DELAY", s.autosave_delay))
    except ValueError:  # keep default
        pass
    s.max_upload_bytes = _int(os.getenv("MAX_UPLOAD_BYTES"), s.max_upload_bytes)
    s.max_photo_bytes = _int(os.getenv("MAX_PHOTO_BYTES"), s.max_photo_bytes)
    s.session_ttl_hours = _int(os.getenv("SESSION_TTL_HOURS"), s.session_ttl_hours)
    return s


settings = load_settings()
