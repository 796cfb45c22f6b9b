"""Configuration loading from environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .utils import parse_bool_env, parse_float_env, parse_int_env, resolve_path

DEFAULT_WATCH_URL = "https://www.youtube.com/watch?v="


@dataclass(frozen=True)
class AppConfig:
    log_level: str
    file_log_level: str
    log_dir: str
    log_file: str
    care_db_path: str
    progress_poll_ms: int = 100
    loop_poll_ms: int = 500
    raga_autoplay_delay_ms: int = 1000
    hero_media_ref: str = "iDSoI-z6qaY"
    hero_loop_start: float = 20.0
    hero_loop_end: float = 40.0
    media_watch_url: str = DEFAULT_WATCH_URL
    skip_app_init: bool = False


def load_config() -> AppConfig:
    base_dir = str(Path(__file__).resolve().parents[1])
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    file_log_level = os.getenv("FILE_LOG_LEVEL", "DEBUG").upper()
    log_dir = resolve_path(os.getenv("LOG_DIR", "logs"), base_dir)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(
        log_dir, f"swar_{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}.log"
    )
    care_db_path = resolve_path(
        os.getenv("CARE_DB_PATH", "data/care.sqlite3").strip(),
        base_dir,
    )
    progress_poll_ms = parse_int_env("PROGRESS_POLL_MS", 100, min_value=20, max_value=1000)
    loop_poll_ms = parse_int_env("LOOP_POLL_MS", 500, min_value=50, max_value=2000)
    raga_autoplay_delay_ms = parse_int_env(
        "RAGA_AUTOPLAY_DELAY_MS",
        1000,
        min_value=0,
        max_value=10000,
    )
    hero_media_ref = os.getenv("HERO_MEDIA_REF", "iDSoI-z6qaY").strip() or "iDSoI-z6qaY"
    hero_loop_start = parse_float_env("HERO_LOOP_START", 20.0, min_value=0.0)
    hero_loop_end = parse_float_env("HERO_LOOP_END", 40.0, min_value=0.0)
    if hero_loop_end <= hero_loop_start:
        # An empty window would seek forever; fall back to the stock clip segment.
        hero_loop_start, hero_loop_end = 20.0, 40.0
    media_watch_url = os.getenv("MEDIA_WATCH_URL", DEFAULT_WATCH_URL).strip() or DEFAULT_WATCH_URL
    return AppConfig(
        log_level=log_level,
        file_log_level=file_log_level,
        log_dir=log_dir,
        log_file=log_file,
        care_db_path=care_db_path,
        progress_poll_ms=progress_poll_ms,
        loop_poll_ms=loop_poll_ms,
        raga_autoplay_delay_ms=raga_autoplay_delay_ms,
        hero_media_ref=hero_media_ref,
        hero_loop_start=hero_loop_start,
        hero_loop_end=hero_loop_end,
        media_watch_url=media_watch_url,
        skip_app_init=parse_bool_env("SWAR_SKIP_APP_INIT", False),
    )
