from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

MAX_RESUME_BYTES = 5 * 1024 * 1024  # 5 MB, same cap as the upload widget


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name)
    if raw is None:
        return tuple(default)
    values = [item.strip().lower() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    analysis_endpoint: str = ""
    analysis_timeout: float = 90.0
    max_resume_bytes: int = MAX_RESUME_BYTES
    resume_extensions: tuple[str, ...] = (".pdf", ".doc", ".docx")
    rate_limit: str = "5/hour"
    rate_limit_enabled: bool = True
    log_level: str = "INFO"
    listing_timeout: float = 15.0


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        analysis_endpoint=_get_env("ANALYSIS_ENDPOINT", "") or "",
        analysis_timeout=_get_env_float("ANALYSIS_TIMEOUT", 90.0),
        max_resume_bytes=_get_env_int("MAX_RESUME_BYTES", MAX_RESUME_BYTES),
        resume_extensions=_get_env_list("RESUME_EXTENSIONS", [".pdf", ".doc", ".docx"]),
        rate_limit=_get_env("RATE_LIMIT_ANALYZE", "5/hour") or "5/hour",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        log_level=(_get_env("LOG_LEVEL", "INFO") or "INFO").upper(),
        listing_timeout=_get_env_float("LISTING_TIMEOUT", 15.0),
    )
