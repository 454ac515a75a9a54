"""
Runtime configuration, read from the environment.

Business thresholds live in rules.py; only deployment knobs belong here.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    log_level: str = "INFO"
    default_source: str = "pbj_data.csv"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def get_settings() -> Settings:
    return Settings(
        max_upload_bytes=_int_env("PBJ_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
        log_level=(os.getenv("PBJ_LOG_LEVEL") or "INFO").strip().upper(),
        default_source=(os.getenv("PBJ_DEFAULT_SOURCE") or "pbj_data.csv").strip(),
    )
