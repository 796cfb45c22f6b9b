"""Domain models for playback sessions, raga lookup and instrument care."""

from .care import (
    INSTRUMENT_TYPES,
    CareRecord,
    TuningStatus,
    WarrantyStatus,
    add_months,
    next_tuning_for,
    parse_iso_date,
    tuning_status,
    warranty_expiry_for,
    warranty_status,
)
from .playback import (
    SEEKABLE_STATES,
    LoopWindow,
    PlaybackConfig,
    PlaybackSession,
    PlaybackState,
    PlayerState,
    ProgressCache,
    ProgressEntry,
)
from .ragas import (
    DAILY_SESSIONS,
    DEFAULT_RAGA_ID,
    RAGA_MEDIA,
    DailySession,
    daily_session_for,
    format_timestamp,
    media_ref_for,
    session_key_for_hour,
)

__all__ = [
    "CareRecord",
    "DAILY_SESSIONS",
    "DEFAULT_RAGA_ID",
    "DailySession",
    "INSTRUMENT_TYPES",
    "LoopWindow",
    "PlaybackConfig",
    "PlaybackSession",
    "PlaybackState",
    "PlayerState",
    "ProgressCache",
    "ProgressEntry",
    "RAGA_MEDIA",
    "SEEKABLE_STATES",
    "TuningStatus",
    "WarrantyStatus",
    "add_months",
    "daily_session_for",
    "format_timestamp",
    "media_ref_for",
    "next_tuning_for",
    "parse_iso_date",
    "session_key_for_hour",
    "tuning_status",
    "warranty_expiry_for",
    "warranty_status",
]
