from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


load_dotenv()

SUPPORTED_AGE_GROUPS = {"elementary", "middle", "high"}
DEFAULT_AGE_GROUP = "middle"


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    app_base_url: str
    data_dir: Path
    upload_dir: Path

    api_key: str
    session_secret: str
    session_ttl_seconds: int

    llm_api_key: str
    llm_api_base: str
    llm_model: str
    llm_timeout_seconds: float

    log_level: str
    log_format: str


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    data_dir = Path(os.getenv("DATA_DIR", "./data"))
    return Settings(
        app_base_url=os.getenv("APP_BASE_URL", "http://localhost:8000"),
        data_dir=data_dir,
        upload_dir=Path(os.getenv("UPLOAD_DIR", str(data_dir / "uploads"))),
        api_key=os.getenv("API_KEY", ""),
        session_secret=os.getenv("SESSION_SECRET", "dev-session-secret"),
        session_ttl_seconds=_env_int("SESSION_TTL_SECONDS", 7 * 24 * 3600),
        llm_api_key=os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY", "")),
        llm_api_base=os.getenv("LLM_API_BASE", "https://api.openai.com/v1"),
        llm_model=os.getenv("LLM_MODEL", "gpt-4o-mini"),
        llm_timeout_seconds=_env_float("LLM_TIMEOUT_SECONDS", 45.0),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_format=os.getenv("LOG_FORMAT", "console"),
    )
